from .documents import InMemoryDocumentStore
from .identity import FakeIdentityStore, FakeAccount

__all__ = ["InMemoryDocumentStore", "FakeIdentityStore", "FakeAccount"]
