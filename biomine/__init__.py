"""Postprocessing jobs for a biological data warehouse."""

__version__ = "0.1.0"
