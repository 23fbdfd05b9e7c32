"""
Packaging for the thermal controller telemetry bridge.

Tests live beside the modules they test (`*_test.py`), with tests that need a serial port
(pyserial's loop:// will do) under integrate/. Install with the test extra and run pytest:

    pip install -e .[test]
    pytest
"""

from setuptools import setup

setup(
    name='thermobridge-py',
    version='0.1.0',
    description='Serial telemetry bridge for line-oriented thermal process controllers.',
    url='',
    author='',
    author_email='',
    license='LGPL',
    package_dir={'': 'src'},
    packages=['thermobridge', 'thermobridge.conduit', 'thermobridge.config', 'thermobridge.connector',
              'thermobridge.protocol', 'thermobridge.support'],
    package_data={'thermobridge.config': ['*.cfg']},
    python_requires='>=3.8',
    install_requires=[
        'pyserial>=3.4',
        'configobj>=5.0.8',
    ],
    extras_require={
        'test': [
            'pytest',
            'PyHamcrest>=2.0',
            'timeout-decorator',
        ],
    },
    entry_points={
        'console_scripts': ['thermobridge-monitor=thermobridge.monitor:main'],
    },
    zip_safe=False,
)
