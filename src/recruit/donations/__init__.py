"""Donation points rules, campaigns and awards."""
