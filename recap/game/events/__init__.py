"""Typed battle events."""
