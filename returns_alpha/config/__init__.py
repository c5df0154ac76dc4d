"""
Model configuration: defaults, YAML overrides and validation.
"""
