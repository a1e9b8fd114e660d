"""Airport ground-operations turnaround and fuel-crisis service."""

__version__ = "1.0.0"
