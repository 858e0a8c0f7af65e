"""AWS Lambda event source mappings as function trigger bindings."""

from __future__ import annotations

from typing import Any, NoReturn

from botocore.exceptions import ClientError

from queuedeploy.aws.clients import TRANSPORT_ERRORS, aws_client, error_code, fallback_error
from queuedeploy.aws.naming import region_from_arn
from queuedeploy.base.config import AWSConfig
from queuedeploy.base.exceptions import (
    BindingConflictError,
    BindingNotFoundError,
    ProviderError,
    ProviderUnavailableError,
    QueueDeployError,
)
from queuedeploy.base.models import Binding
from queuedeploy.base.providers import BindingProvider

_ERROR_MAP: dict[str, type[QueueDeployError]] = {
    "ResourceNotFoundException": BindingNotFoundError,
    "ResourceConflictException": BindingConflictError,
    # Mapping is still Creating/Updating; the call succeeds once it settles.
    "ResourceInUseException": ProviderUnavailableError,
}


def _handle(
    e: ClientError,
    msg: str,
    overrides: dict[str, type[QueueDeployError]] | None = None,
) -> NoReturn:
    code = error_code(e)
    exc = (overrides or {}).get(code) or _ERROR_MAP.get(code)
    raise (exc or fallback_error(e))(msg) from e


class LambdaBindingProvider(BindingProvider):
    """Event source mappings between an SQS queue and a Lambda function.

    Attributes:
        config: AWS credentials.
        region_name: Region of the function.
    """

    def __init__(self, config: AWSConfig, region_name: str) -> None:
        self.config = config
        self.region_name = region_name

    def _client(self, region_name: str | None = None) -> Any:
        return aws_client("lambda", self.config, region_name or self.region_name)

    def create(self, function_ref: str, queue_identity: str, batch_size: int) -> str:
        """Create an event source mapping and return its UUID.

        Raises:
            BindingConflictError: If the function is already mapped to the queue.
            ProviderError: If the function does not exist, or on any other
                Lambda error.
        """
        msg = f"Failed to bind function '{function_ref}' to '{queue_identity}'"
        try:
            resp = self._client(region_from_arn(queue_identity)).create_event_source_mapping(
                EventSourceArn=queue_identity,
                FunctionName=function_ref,
                BatchSize=batch_size,
                Enabled=True,
            )
        except ClientError as e:
            # On create, a missing resource is the function, not the binding.
            _handle(e, msg, {"ResourceNotFoundException": ProviderError})
        except TRANSPORT_ERRORS as e:
            raise ProviderUnavailableError(msg) from e
        return resp["UUID"]  # type: ignore[no-any-return]

    def delete(self, binding_id: str) -> None:
        try:
            self._client().delete_event_source_mapping(UUID=binding_id)
        except ClientError as e:
            _handle(e, f"Failed to delete binding '{binding_id}'")
        except TRANSPORT_ERRORS as e:
            raise ProviderUnavailableError(f"Failed to delete binding '{binding_id}'") from e

    def list(self, function_ref: str) -> list[Binding]:
        """List the event source mappings of *function_ref* across all pages."""
        try:
            paginator = self._client().get_paginator("list_event_source_mappings")
            return [
                Binding(
                    binding_id=m["UUID"],
                    function_ref=m.get("FunctionArn", function_ref),
                    queue_identity=m.get("EventSourceArn", ""),
                    batch_size=m.get("BatchSize", 1),
                    state=m.get("State"),
                )
                for page in paginator.paginate(FunctionName=function_ref)
                for m in page.get("EventSourceMappings", [])
            ]
        except ClientError as e:
            _handle(e, f"Failed to list bindings of '{function_ref}'")
        except TRANSPORT_ERRORS as e:
            raise ProviderUnavailableError(f"Failed to list bindings of '{function_ref}'") from e
