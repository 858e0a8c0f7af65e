"""Queue component: the interface exposed to callers.

A component instance owns one state key.  ``deploy`` converges the queue
(and optional function binding) to the given inputs; ``remove`` tears
down whatever the state records.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from queuedeploy.base.async_support import AsyncMixin
from queuedeploy.base.providers import ProviderFactory
from queuedeploy.base.state import StateStore
from queuedeploy.engine.reconciler import Reconciler
from queuedeploy.engine.resolver import DEFAULTS, ConfigResolver, merge_deep, validate


class QueueComponent(AsyncMixin):
    """Deploys and removes one queue.

    Args:
        provider_factory: Builds the provider collaborators for a region.
        state_store: Where the committed state lives.
        key: State key of this component instance.
        defaults: Defaults that caller inputs are merged over.

    Example::

        component = QueueComponent(aws.provider_factory(cfg), FileStateStore(), "orders")
        component.deploy({"name": "orders", "functionRef": "process-orders"})
    """

    __async_methods__ = ("deploy", "remove")

    def __init__(
        self,
        provider_factory: ProviderFactory,
        state_store: StateStore,
        key: str = "default",
        defaults: Mapping[str, Any] | None = None,
    ) -> None:
        self.provider_factory = provider_factory
        self.state_store = state_store
        self.key = key
        self.defaults = dict(DEFAULTS if defaults is None else defaults)
        self.reconciler = Reconciler(provider_factory, state_store, key)

    def deploy(self, inputs: Mapping[str, Any] | None = None) -> dict[str, str]:
        """Converge the queue to *inputs*.

        Returns:
            ``{"identity": ..., "locator": ...}`` of the deployed queue.

        Raises:
            InvalidConfigError, AuthError, ProviderUnavailableError,
            BindingConflictError, InconsistentStateError.
        """
        inputs = inputs or {}
        region = validate(self.defaults, inputs).region
        providers = self.provider_factory(region)
        desired = ConfigResolver(providers.identity, providers.addressing, self.defaults).resolve(
            inputs
        )

        prior = self.state_store.load(self.key)
        state = self.reconciler.deploy(desired, prior)
        return {"identity": state.identity, "locator": state.locator}

    def remove(self, inputs: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Delete the tracked binding and queue, then clear the state.

        With no recorded state the queue address is derived from the
        input name and region (falling back to the defaults).
        """
        inputs = inputs or {}
        prior = self.state_store.load(self.key)
        merged = merge_deep(self.defaults, inputs)
        fallback = {
            "name": inputs.get("name") or prior.name or merged.get("name"),
            "region": prior.region or merged.get("region"),
        }
        target = validate(self.defaults, {**inputs, **fallback})

        self.reconciler.remove(prior, target.name, target.region)
        return {}

    def outputs(self) -> dict[str, str | None]:
        """Committed outputs as ``{"arn": ..., "url": ...}``."""
        state = self.state_store.load(self.key)
        return {"arn": state.identity, "url": state.locator}
