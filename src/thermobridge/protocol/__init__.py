"""
The device's line protocol: reassembling lines from the byte stream and parsing telemetry.
"""
