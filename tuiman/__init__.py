"""tuiman - a terminal HTTP request composer and runner."""

__version__ = "0.1.0"
