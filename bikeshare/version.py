"""
Version
-------

The version the client reports on the command line and to Sentry.

.. autodata:: bikeshare.version.__version__
"""

__version__ = "1.0.0"
"""The current version."""

name = "bikeshare"
