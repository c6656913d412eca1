"""TrackMyExts - keep your editor extensions under version control."""

try:
    from importlib.metadata import version

    __version__ = version("trackmyexts")
except Exception:
    __version__ = "0.0.0"  # Fallback for development/testing

__all__ = ["__version__"]
