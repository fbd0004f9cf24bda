"""Core walk, classification and decoding logic."""
