"""Content store boundary and its JSON-file implementation."""

from .base import PostExists, Store, StoreWriteFailed
from .json_store import JsonFileStore

__all__ = ["PostExists", "Store", "StoreWriteFailed", "JsonFileStore"]
