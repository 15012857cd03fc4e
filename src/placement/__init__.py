"""Placement portal API."""
