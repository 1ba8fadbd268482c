"""Database layer for learning style profiles."""
