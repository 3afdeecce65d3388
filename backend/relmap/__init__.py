"""Relationship health graph engine."""
