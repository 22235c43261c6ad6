"""Weeks: your life in weeks, plus daily reflections."""

__version__ = "0.1.0"
