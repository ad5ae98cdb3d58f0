"""Recruiting chat assistant."""
