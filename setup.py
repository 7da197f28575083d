import os

from setuptools import setup, find_packages

with open(os.path.join(os.path.dirname(__file__), "readme.md"), "r") as fh:
    long_description = fh.read()

setup(
    name='bikeshare',
    version='1.0.0',
    license='MIT',
    description='A client for renting, inspecting and returning bikes on a pair of ledgers',
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires='>=3.8',
    install_requires=[
        'aiohttp',
        'uvloop>=0.18',
        'aiobreaker',
        'marshmallow>=3.13',
        'sentry-sdk',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-asyncio',
            'pytest-aiohttp',
            'pytest-mock',
            'Faker',
        ],
    },
    entry_points={
        'console_scripts': ['bikeshare=bikeshare.cli:run'],
    },
)
