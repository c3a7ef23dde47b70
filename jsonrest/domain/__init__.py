"""Domain models for jsonrest."""
