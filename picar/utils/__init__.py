"""Utilities package - reply elements, delivery and message templates."""
