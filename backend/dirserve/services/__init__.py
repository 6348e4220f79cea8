"""Filesystem services behind the file routes."""
