"""partscan core.

Subpackages:
    markers    declarative markers, import wrappers, marker providers
    model      immutable part definitions and discovery results
    discovery  part assembly and module scanning
    config     YAML configuration with environment overrides
"""
