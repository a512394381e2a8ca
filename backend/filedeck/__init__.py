"""FileDeck: sandboxed file manager backend."""

__version__ = "0.1.0"
