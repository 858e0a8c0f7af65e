from .binding import LambdaBindingProvider
from .factory import provider_factory, provider_set
from .identity import StsIdentity
from .naming import SqsAddressing
from .queue import SqsQueueProvider
from .state_store import S3StateStore

__all__ = [
    "LambdaBindingProvider",
    "provider_factory",
    "provider_set",
    "StsIdentity",
    "SqsAddressing",
    "SqsQueueProvider",
    "S3StateStore",
]
