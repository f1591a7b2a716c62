"""Database models and operations."""
