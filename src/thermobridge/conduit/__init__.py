"""
The conduit package provides the open serial port the reader and writer use, and discovery
of the serial ports on this system.
"""
