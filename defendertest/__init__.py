"""Generate large synthetic file trees for scanner stress tests."""

__version__ = "0.1.0"
