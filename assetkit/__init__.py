"""Sources, loaders, file watching and dependency tracking for assets named by dotted ids."""

__version__ = "0.1.0"

__all__ = [
    "dependencies",
    "embedded",
    "keys",
    "loader",
    "paths",
    "source",
    "watcher",
    "zipsource",
]