"""Gateway controller core: reconcilers, manager and in-memory object store."""

__version__ = "0.1.0"