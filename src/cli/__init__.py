"""Lumina command-line interface."""
