"""Core packages for Rewind."""
