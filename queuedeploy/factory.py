"""Component factory.

Provides :func:`build_component`, the single entry point for creating a
:class:`~queuedeploy.component.QueueComponent` wired to a cloud provider.
"""

from typing import Any, Callable, Literal

from pydantic import BaseModel

from queuedeploy.aws.factory import provider_factory as aws_provider_factory
from queuedeploy.base.config import validate_config
from queuedeploy.base.providers import ProviderFactory
from queuedeploy.base.state import StateStore
from queuedeploy.component import QueueComponent
from queuedeploy.stores import FileStateStore

existing_cloud_providers = Literal["aws"]

# cloud_provider -> builder of a region-keyed provider factory
_FACTORY_REGISTRY: dict[str, Callable[[Any], ProviderFactory]] = {
    "aws": aws_provider_factory,
}


def build_component(
    cloud_provider: existing_cloud_providers,
    config: dict,
    state_store: StateStore | None = None,
    key: str = "default",
    defaults: dict | None = None,
) -> QueueComponent:
    """
    Create a queue component for a cloud provider.
    Args:
        cloud_provider: The cloud provider (e.g. 'aws').
        config: Credential configuration, validated by the provider's config model.
        state_store: Where state is kept; defaults to a ``.queuedeploy`` directory.
        key: State key of the component instance.
        defaults: Overrides for the built-in input defaults.
    Returns:
        A ready :class:`QueueComponent`.
    Raises:
        ValueError: If the cloud provider is not supported.
        pydantic.ValidationError: If the config is invalid.
    """
    if cloud_provider not in _FACTORY_REGISTRY:
        raise ValueError(f"Unsupported cloud provider: {cloud_provider}")

    config_obj: BaseModel = validate_config(cloud_provider, config)
    factory = _FACTORY_REGISTRY[cloud_provider](config_obj)
    return QueueComponent(
        factory,
        state_store if state_store is not None else FileStateStore(),
        key=key,
        defaults=defaults,
    )
