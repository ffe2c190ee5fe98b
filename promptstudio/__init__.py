"""Prompt Framework Studio - structured prompt builder."""

__version__ = "1.0.0"
