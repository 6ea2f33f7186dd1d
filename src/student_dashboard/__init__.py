"""Derived-state engine for the student performance dashboard."""

__version__ = "0.1.0"
