"""Small shared helpers."""

from .batching import chunked

__all__ = ["chunked"]
