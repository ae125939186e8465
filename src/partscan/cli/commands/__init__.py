"""Top-level partscan commands."""
