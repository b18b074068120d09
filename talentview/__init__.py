"""Client-side candidate filtering and recruiting dashboard stats."""

__version__ = "0.1.0"
