"""AWS provider factory.

``provider_factory`` is consumed by :func:`queuedeploy.factory.build_component`.
"""

from functools import partial

from queuedeploy.aws.binding import LambdaBindingProvider
from queuedeploy.aws.identity import StsIdentity
from queuedeploy.aws.naming import SqsAddressing
from queuedeploy.aws.queue import SqsQueueProvider
from queuedeploy.base.config import AWSConfig
from queuedeploy.base.providers import ProviderFactory, ProviderSet


def provider_set(config: AWSConfig, region: str) -> ProviderSet:
    """Collaborators for *region*; SDK clients are shared via the client cache."""
    return ProviderSet(
        identity=StsIdentity(config, region),
        queues=SqsQueueProvider(config, region),
        bindings=LambdaBindingProvider(config, region),
        addressing=SqsAddressing(),
    )


def provider_factory(config: AWSConfig) -> ProviderFactory:
    return partial(provider_set, config)
