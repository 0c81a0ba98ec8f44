"""Find CSS rules that never match an element on a set of pages."""

__version__ = "0.1.0"
