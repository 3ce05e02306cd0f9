"""smbuilder - generate C state machine code from YAML descriptions."""

__version__ = "0.1.0"
