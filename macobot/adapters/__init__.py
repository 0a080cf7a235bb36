"""Chat backend adapters."""
