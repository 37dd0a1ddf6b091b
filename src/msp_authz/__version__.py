"""Version information for msp-authz."""

__version__ = "0.1.0"
