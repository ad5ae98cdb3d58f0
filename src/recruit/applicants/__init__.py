"""Applicant intake and admin review."""
