"""Abstract blueprints, records and core utilities.

Every provider implementation inherits from one of the blueprints defined
here.  Import them to type-hint your own code or to plug in fakes.
"""

from .models import Binding, DesiredConfig, PersistedState, RemoteQueue
from .providers import (
    Addressing,
    BindingProvider,
    IdentityProvider,
    ProviderFactory,
    ProviderSet,
    QueueProvider,
)
from .state import StateStore


__all__ = [
    "Binding",
    "DesiredConfig",
    "PersistedState",
    "RemoteQueue",
    "Addressing",
    "BindingProvider",
    "IdentityProvider",
    "ProviderFactory",
    "ProviderSet",
    "QueueProvider",
    "StateStore",
]
