"""
The primary entry point to the client.
"""
from bikeshare import logger
from bikeshare.cli import run
from bikeshare.version import __version__, name

if __name__ == '__main__':
    logger.info(f'Starting {name} %s!', __version__)
    run()
