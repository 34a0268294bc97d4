"""Dormitory occupant, attendance and shared-bill management."""

__version__ = "0.1.0"
