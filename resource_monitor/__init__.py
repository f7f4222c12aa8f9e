"""Resident CPU and memory monitor with hysteretic threshold alerts."""

__version__ = "0.1.0"
