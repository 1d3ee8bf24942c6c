"""stackwipe - interactive AWS resource wipe for failed deployments."""

__version__ = "0.4.0"
