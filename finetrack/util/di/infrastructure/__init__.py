"""Infrastructure providers."""

# Import bases
from .auth import AuthProvider
from .persistence import PersistenceProvider
from .realtime import RealtimeProvider

# Import implementations (needed for __subclasses__())
from .auth import ProdAuthProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401
from .realtime import ProdRealtimeProvider  # noqa: F401

__all__ = [
    "AuthProvider",
    "PersistenceProvider",
    "ProdAuthProvider",
    "ProdPersistenceProvider",
    "ProdRealtimeProvider",
    "RealtimeProvider",
]
