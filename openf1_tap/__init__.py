"""Poll the OpenF1 telemetry API and persist the records to a file."""

__version__ = "0.1.0"
