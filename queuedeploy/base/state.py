"""State store blueprint."""

from abc import ABC, abstractmethod

from .models import PersistedState


class StateStore(ABC):
    """Durable record of what a component last provisioned.

    The store is expected to serialise concurrent runs against the same
    key; the reconciler does no locking of its own.
    """

    @abstractmethod
    def load(self, key: str) -> PersistedState:
        """Return the state stored under *key*, or an empty state."""

    @abstractmethod
    def save(self, key: str, state: PersistedState) -> None:
        """Replace the state stored under *key*.

        Saving an empty state marks the resource as removed.
        """
