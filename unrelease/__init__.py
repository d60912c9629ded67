"""Check and retract released versions (git tags, npm registry)."""

__version__ = "0.1.0"
