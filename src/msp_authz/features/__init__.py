"""Feature packages of msp-authz.

- permissions/: flat three-tier permission resolution
- access/: hierarchical, rule-based per-resource access resolution
"""
