"""Customer Account API "login with store" OAuth bridge."""

__version__ = "0.1.0"
