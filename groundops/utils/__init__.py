"""Utility helpers for the ground-operations backend."""

from .clock import minutes_from, utcnow

__all__ = ["utcnow", "minutes_from"]
