"""Measure how new PHP reserved keywords would affect popular packages."""

__version__ = "0.1.0"