"""Power Layout package entry.

Provides a stable module entrypoint (``python -m powerlayout``) next to the
top-level packages (app/, domain/, screens/, services/, storage/).
"""

from powerlayout.version import __version__  # single source of truth

__all__ = ["__version__"]
