"""Command-line interface for TrackMyExts."""

from trackmyexts.cli.main import main

__all__ = ["main"]
