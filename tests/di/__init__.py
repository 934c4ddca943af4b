"""Mock providers for testing."""

from .auth import MockAuthProvider
from .persistence import MockPersistenceProvider, SharedPersistenceProvider
from .realtime import MockRealtimeProvider
from .container import build_test_container

__all__ = [
    "MockAuthProvider",
    "MockPersistenceProvider",
    "MockRealtimeProvider",
    "SharedPersistenceProvider",
    "build_test_container",
]
