"""Watchlist domain logic."""
