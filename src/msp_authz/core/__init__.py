"""Core building blocks shared by every msp-authz feature."""
