"""Version information for campus-authz."""

__version__ = "0.1.0"
