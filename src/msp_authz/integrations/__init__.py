"""Framework integrations for msp-authz."""
