from .denylist_store import InMemoryDenylistStore, TokenDenylistStore
from .token_provider import StubTokenProvider, TokenProvider

__all__ = [
    "InMemoryDenylistStore",
    "StubTokenProvider",
    "TokenDenylistStore",
    "TokenProvider",
]
