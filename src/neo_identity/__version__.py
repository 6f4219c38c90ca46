"""Version information for neo-identity-gateway."""

__version__ = "0.1.0"
