"""Display-ready transcripts from Claude Code session logs."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("sessionview")
except PackageNotFoundError:
    # Running from a source tree that was never installed
    __version__ = "0.0.0"

__all__ = ["__version__"]
