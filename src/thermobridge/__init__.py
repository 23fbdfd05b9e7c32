"""
Telemetry bridge for a line-oriented serial thermal process controller.

- Conduit: an open serial port (or pyserial URL) providing chunked reads and text writes.
- Reader: a background thread that reads from the conduit, reassembles CR/LF terminated
  lines and parses them into telemetry events.
- Simulation: a background thread that synthesizes readings when no hardware is present.
- ConnectionManager: owns the port and the workers, and moves between the
  CLOSED, OPEN and SIMULATING states. Only one of hardware or simulation runs at a time.
- Events: PVUpdate, SPUpdate and StatusChange, posted to observers registered with the
  manager's EventSource. A failing observer does not affect the others.
- Session log: an append-only, timestamped file of everything the bridge did.

Device faults never propagate out of the workers: they become StatusChange events and
session log records, and the connection stays up until it is closed.
"""

__version__ = '0.1.0'
