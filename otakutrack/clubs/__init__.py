"""Club domain logic."""
