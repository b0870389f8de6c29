"""HousePlanner: find amenities near a home address and route to them."""

__version__ = "1.0.0"
