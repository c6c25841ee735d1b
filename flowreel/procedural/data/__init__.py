"""Keyword tables and palettes for the scene profile builder."""
