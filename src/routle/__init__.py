"""Routle: a city-to-city geography guessing game."""

__version__ = "0.1.0"
