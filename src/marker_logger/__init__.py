"""Live marker-stream logger for Lab Streaming Layer networks."""

__version__ = "0.1.0"
