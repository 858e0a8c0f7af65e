"""Records exchanged between the resolver, the reconciler and the providers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

MIN_BATCH_SIZE = 1
MAX_BATCH_SIZE = 10000


class DesiredInputs(BaseModel):
    """Caller input after defaults are merged, before identity is derived."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    region: str = Field(min_length=1)
    batch_size: int = Field(default=1, ge=MIN_BATCH_SIZE, le=MAX_BATCH_SIZE)
    function_ref: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)


class DesiredConfig(DesiredInputs):
    """Desired queue configuration for one reconciliation run.

    ``identity`` and ``locator`` are derived from the account, ``name`` and
    ``region`` by the resolver and are never taken from caller input.
    """

    identity: str
    locator: str


class PersistedState(BaseModel):
    """Last committed reality as known to this component.

    ``binding_queue`` and ``binding_region`` record the queue identity and
    region the binding was created against; they can lag behind
    ``identity`` and ``region`` while a replacement is half done.
    An empty instance (every field ``None``) means nothing is provisioned.
    """

    name: str | None = None
    region: str | None = None
    identity: str | None = None
    locator: str | None = None
    bound_function: str | None = None
    binding_id: str | None = None
    binding_queue: str | None = None
    binding_region: str | None = None

    @property
    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())


class RemoteQueue(BaseModel):
    """Live snapshot of a queue returned by the provider."""

    locator: str
    attributes: dict[str, str] = Field(default_factory=dict)


class Binding(BaseModel):
    """Trigger relationship between one function and one queue."""

    binding_id: str
    function_ref: str
    queue_identity: str
    batch_size: int = 1
    state: str | None = None


__all__ = [
    "DesiredInputs",
    "DesiredConfig",
    "PersistedState",
    "RemoteQueue",
    "Binding",
    "MIN_BATCH_SIZE",
    "MAX_BATCH_SIZE",
]
