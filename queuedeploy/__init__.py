"""queuedeploy: provision a message queue and its function trigger declaratively.

Entry point for the library.  Import :func:`build_component` to get a
component wired to a cloud provider::

    from queuedeploy import build_component

    component = build_component("aws", {"region_name": "eu-central-1"}, key="orders")
    component.deploy({"name": "orders", "functionRef": "process-orders"})
    component.remove()
"""

from .base import (
    Addressing,
    Binding,
    BindingProvider,
    DesiredConfig,
    IdentityProvider,
    PersistedState,
    ProviderSet,
    QueueProvider,
    RemoteQueue,
    StateStore,
)
from .component import QueueComponent
from .factory import build_component
from .stores import FileStateStore, MemoryStateStore

__all__ = [
    "Addressing",
    "Binding",
    "BindingProvider",
    "DesiredConfig",
    "IdentityProvider",
    "PersistedState",
    "ProviderSet",
    "QueueProvider",
    "RemoteQueue",
    "StateStore",
    "QueueComponent",
    "build_component",
    "FileStateStore",
    "MemoryStateStore",
]
