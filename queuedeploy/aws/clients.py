"""Shared boto3 client construction and error classification."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.exceptions import (
    ClientError,
    ConnectionClosedError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from queuedeploy.base.client_cache import ClientCache
from queuedeploy.base.config import AWSConfig
from queuedeploy.base.exceptions import ProviderError, ProviderUnavailableError

# botocore errors raised before any response arrives
TRANSPORT_ERRORS: tuple[type[Exception], ...] = (
    EndpointConnectionError,
    ConnectTimeoutError,
    ReadTimeoutError,
    ConnectionClosedError,
)

THROTTLING_CODES = frozenset(
    {
        "Throttling",
        "ThrottlingException",
        "RequestThrottled",
        "RequestLimitExceeded",
        "TooManyRequestsException",
        "ServiceUnavailable",
        "ServiceException",
        "InternalError",
        "InternalFailure",
        "RequestTimeout",
    }
)


def error_code(e: ClientError) -> str:
    return e.response.get("Error", {}).get("Code", "")


def fallback_error(e: ClientError) -> type[ProviderError]:
    """Classify a client error no service map claims."""
    if error_code(e) in THROTTLING_CODES:
        return ProviderUnavailableError
    return ProviderError


def aws_client(service_name: str, config: AWSConfig, region_name: str | None = None) -> Any:
    """Return a shared boto3 client for *service_name* in *region_name*."""
    kwargs = config.client_kwargs(region_name)
    return ClientCache().get_or_create(
        service_name,
        kwargs["region_name"],
        kwargs,
        lambda: boto3.client(service_name, **kwargs),
    )
