"""TravelHub booking pricing."""

__version__ = "1.0.0"
