"""Read archived IDE interaction events as typed records."""

__version__ = "0.1.0"
