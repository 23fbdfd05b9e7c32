"""
The connector manages the lifecycle of the connection to the controller: opening and closing
the port, running the reader, and switching to simulation.
"""
