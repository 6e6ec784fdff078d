from geo_visibility.store.base import CheckStore
from geo_visibility.store.memory import InMemoryCheckStore

__all__ = ["CheckStore", "InMemoryCheckStore"]
