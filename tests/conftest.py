"""Shared fixtures: in-memory providers wrapped in mocks that record call order."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from unittest.mock import MagicMock

import pytest

from queuedeploy.aws.naming import SqsAddressing
from queuedeploy.base.client_cache import ClientCache
from queuedeploy.base.exceptions import BindingNotFoundError, QueueNotFoundError
from queuedeploy.base.models import Binding, DesiredConfig, RemoteQueue
from queuedeploy.base.providers import (
    BindingProvider,
    IdentityProvider,
    ProviderSet,
    QueueProvider,
)
from queuedeploy.component import QueueComponent
from queuedeploy.stores import MemoryStateStore

ACCOUNT = "123456789012"


def url(name: str, region: str = "eu-central-1") -> str:
    return f"https://sqs.{region}.amazonaws.com/{ACCOUNT}/{name}"


def arn(name: str, region: str = "eu-central-1") -> str:
    return f"arn:aws:sqs:{region}:{ACCOUNT}:{name}"


class FakeQueues(QueueProvider):
    def __init__(self) -> None:
        self.live: dict[str, RemoteQueue] = {}

    def get(self, locator: str) -> RemoteQueue | None:
        return self.live.get(locator)

    def create(self, config: DesiredConfig) -> None:
        self.live[config.locator] = RemoteQueue(locator=config.locator)

    def delete(self, locator: str) -> None:
        if self.live.pop(locator, None) is None:
            raise QueueNotFoundError(locator)

    def set_attributes(self, locator: str, config: DesiredConfig) -> None:
        if locator not in self.live:
            raise QueueNotFoundError(locator)


class FakeBindings(BindingProvider):
    def __init__(self) -> None:
        self.live: dict[str, Binding] = {}
        self._ids = itertools.count(1)

    def create(self, function_ref: str, queue_identity: str, batch_size: int) -> str:
        binding_id = f"uuid-{next(self._ids)}"
        self.live[binding_id] = Binding(
            binding_id=binding_id,
            function_ref=function_ref,
            queue_identity=queue_identity,
            batch_size=batch_size,
        )
        return binding_id

    def delete(self, binding_id: str) -> None:
        if self.live.pop(binding_id, None) is None:
            raise BindingNotFoundError(binding_id)

    def list(self, function_ref: str) -> list[Binding]:
        return [b for b in self.live.values() if b.function_ref == function_ref]


@dataclass
class World:
    fake_queues: FakeQueues
    fake_bindings: FakeBindings
    queues: MagicMock
    bindings: MagicMock
    identity: MagicMock
    calls: MagicMock
    store: MemoryStateStore
    component: QueueComponent

    def mutations(self) -> list[str]:
        """Names of provider calls that change remote state, in call order."""
        reads = {"queues.get", "bindings.list"}
        return [c[0] for c in self.calls.mock_calls if c[0] not in reads]


@pytest.fixture(autouse=True)
def _clear_client_cache():
    ClientCache().clear()
    yield
    ClientCache().clear()


@pytest.fixture
def world() -> World:
    fake_queues = FakeQueues()
    fake_bindings = FakeBindings()
    queues = MagicMock(wraps=fake_queues)
    bindings = MagicMock(wraps=fake_bindings)
    identity = MagicMock(spec=IdentityProvider)
    identity.account_id.return_value = ACCOUNT

    calls = MagicMock()
    calls.attach_mock(queues, "queues")
    calls.attach_mock(bindings, "bindings")

    providers = ProviderSet(
        identity=identity,
        queues=queues,
        bindings=bindings,
        addressing=SqsAddressing(),
    )
    store = MemoryStateStore()
    component = QueueComponent(lambda region: providers, store, key="orders")
    return World(fake_queues, fake_bindings, queues, bindings, identity, calls, store, component)
