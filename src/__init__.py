"""poscache: async resource caches for a point-of-sale back office."""

from poscache.version import __version__

__all__ = ["__version__"]
