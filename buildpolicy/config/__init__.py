"""Build-policy configuration.

Holds the single source of truth for the enforced policy: a YAML policy file
when one exists, otherwise the hard-coded defaults.
"""
