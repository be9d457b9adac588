"""Command line interface for schemac."""

from schemac import __version__

__all__ = ["__version__"]
