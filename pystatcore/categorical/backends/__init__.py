"""Categorical backends."""
