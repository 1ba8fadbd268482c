"""Lumina learning style engine."""
