"""Japanese study-card reader: image analysis and paced speech synthesis."""

__version__ = "1.0.0"
