"""Core types, configuration and flag classification."""
