"""Runtime wiring: configuration, console session and tick loop."""
