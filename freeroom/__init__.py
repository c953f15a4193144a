"""Free classroom data from a course handbook, stored in MongoDB, with a health-checked HTTP service."""

__version__ = "2.0.0"