# This project was developed with assistance from AI tools.
"""Snang portal API."""
