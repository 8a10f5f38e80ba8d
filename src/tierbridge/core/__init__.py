"""Core — config, logging, metrics, and the error taxonomy."""
