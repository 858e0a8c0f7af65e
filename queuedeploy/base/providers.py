"""Provider blueprints consumed by the reconciliation engine.

Each cloud provider implements these interfaces (see :mod:`queuedeploy.aws`).
Implementations translate SDK errors into :mod:`queuedeploy.base.exceptions`;
in particular a missing resource is reported as a
:class:`~queuedeploy.base.exceptions.NotFoundError` subclass, never as a
raw error code.

Terminology mapping (AWS):
    - **identity** → SQS queue ARN
    - **locator** → SQS queue URL
    - **binding** → Lambda event source mapping (``bindingId`` = UUID)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from .models import Binding, DesiredConfig, RemoteQueue


class IdentityProvider(ABC):
    """Resolves the caller's account identity."""

    @abstractmethod
    def account_id(self) -> str:
        """Return the account identifier of the current credentials.

        Raises:
            AuthError: If the identity cannot be resolved.
        """


class Addressing(ABC):
    """The provider's fixed addressing scheme for queues.

    Both methods must be pure: the same inputs always give the same
    output, with no provider calls.
    """

    @abstractmethod
    def identity(self, account_id: str, name: str, region: str) -> str:
        """Stable resource identifier of the queue."""

    @abstractmethod
    def locator(self, account_id: str, name: str, region: str) -> str:
        """Address used to read, update and delete the queue."""


class QueueProvider(ABC):
    """Queue lifecycle operations."""

    @abstractmethod
    def get(self, locator: str) -> RemoteQueue | None:
        """Return the live queue at *locator*, or ``None`` if absent."""

    @abstractmethod
    def create(self, config: DesiredConfig) -> None:
        """Create the queue described by *config*."""

    @abstractmethod
    def delete(self, locator: str) -> None:
        """Delete the queue at *locator*.

        Raises:
            QueueNotFoundError: If the queue is already gone.
        """

    @abstractmethod
    def set_attributes(self, locator: str, config: DesiredConfig) -> None:
        """Apply the attributes of *config* to the existing queue.

        Raises:
            QueueNotFoundError: If no queue exists at *locator*.
        """


class BindingProvider(ABC):
    """Function trigger binding operations."""

    @abstractmethod
    def create(self, function_ref: str, queue_identity: str, batch_size: int) -> str:
        """Bind *function_ref* to the queue and return the binding id.

        Raises:
            BindingConflictError: If an incompatible binding already exists.
        """

    @abstractmethod
    def delete(self, binding_id: str) -> None:
        """Delete a binding.  May raise :class:`BindingNotFoundError`."""

    @abstractmethod
    def list(self, function_ref: str) -> list[Binding]:
        """List every binding of *function_ref*, in provider order."""


@dataclass(frozen=True)
class ProviderSet:
    """Collaborators for one region."""

    identity: IdentityProvider
    queues: QueueProvider
    bindings: BindingProvider
    addressing: Addressing


# Builds the collaborators for a region.
ProviderFactory = Callable[[str], ProviderSet]
