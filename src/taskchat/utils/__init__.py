"""Utility helpers for taskchat."""
