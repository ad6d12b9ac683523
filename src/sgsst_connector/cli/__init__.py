"""Command line entry point for the SGSST connector."""

from .main import app

__all__ = ["app"]
