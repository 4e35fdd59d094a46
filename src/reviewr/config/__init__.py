"""Paths, messages and runtime settings for reviewr."""
