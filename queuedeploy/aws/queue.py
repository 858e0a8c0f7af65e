"""AWS SQS implementation of the queue blueprint."""

from __future__ import annotations

import json
from typing import Any, NoReturn

from botocore.exceptions import ClientError

from queuedeploy.aws.clients import TRANSPORT_ERRORS, aws_client, error_code, fallback_error
from queuedeploy.aws.naming import region_from_url
from queuedeploy.base.config import AWSConfig
from queuedeploy.base.exceptions import (
    ProviderError,
    ProviderUnavailableError,
    QueueNotFoundError,
)
from queuedeploy.base.models import DesiredConfig, RemoteQueue
from queuedeploy.base.providers import QueueProvider

_ERROR_MAP: dict[str, type[ProviderError]] = {
    "AWS.SimpleQueueService.NonExistentQueue": QueueNotFoundError,
    "QueueDoesNotExist": QueueNotFoundError,
    # Re-creating a name within 60s of deleting it; clears by itself.
    "AWS.SimpleQueueService.QueueDeletedRecently": ProviderUnavailableError,
    "QueueDeletedRecently": ProviderUnavailableError,
}

# SQS rejects these in SetQueueAttributes.
_CREATE_ONLY = frozenset({"FifoQueue"})


def _handle(e: ClientError, msg: str) -> NoReturn:
    exc = _ERROR_MAP.get(error_code(e))
    raise (exc or fallback_error(e))(msg) from e


def attribute_name(key: str) -> str:
    """Map ``visibilityTimeout`` / ``visibility_timeout`` to ``VisibilityTimeout``."""
    if "_" in key:
        return "".join(part[:1].upper() + part[1:] for part in key.split("_") if part)
    return key[:1].upper() + key[1:]


def attribute_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def to_sqs_attributes(attributes: dict[str, Any], *, for_update: bool = False) -> dict[str, str]:
    """Convert desired queue attributes to the string map SQS expects.

    ``None`` values are dropped.  With *for_update*, create-only
    attributes are dropped too.
    """
    converted: dict[str, str] = {}
    for key, value in attributes.items():
        if value is None:
            continue
        name = attribute_name(key)
        if for_update and name in _CREATE_ONLY:
            continue
        converted[name] = attribute_value(value)
    return converted


class SqsQueueProvider(QueueProvider):
    """AWS SQS queue lifecycle.

    URL-addressed calls go to the region encoded in the queue URL, so a
    queue left behind in another region can still be deleted.
    """

    def __init__(self, config: AWSConfig, region_name: str) -> None:
        self.config = config
        self.region_name = region_name

    def _client(self, locator: str | None = None) -> Any:
        region = (region_from_url(locator) if locator else None) or self.region_name
        return aws_client("sqs", self.config, region)

    def get(self, locator: str) -> RemoteQueue | None:
        try:
            resp = self._client(locator).get_queue_attributes(
                QueueUrl=locator, AttributeNames=["All"]
            )
        except ClientError as e:
            if _ERROR_MAP.get(error_code(e)) is QueueNotFoundError:
                return None
            _handle(e, f"Failed to read queue '{locator}'")
        except TRANSPORT_ERRORS as e:
            raise ProviderUnavailableError(f"Failed to read queue '{locator}'") from e
        return RemoteQueue(locator=locator, attributes=resp.get("Attributes", {}))

    def create(self, config: DesiredConfig) -> None:
        attrs = to_sqs_attributes(config.attributes)
        if config.name.endswith(".fifo"):
            attrs.setdefault("FifoQueue", "true")
        try:
            aws_client("sqs", self.config, config.region).create_queue(
                QueueName=config.name,
                Attributes=attrs,
            )
        except ClientError as e:
            _handle(e, f"Failed to create queue '{config.name}'")
        except TRANSPORT_ERRORS as e:
            raise ProviderUnavailableError(f"Failed to create queue '{config.name}'") from e

    def delete(self, locator: str) -> None:
        """Delete an SQS queue.

        Raises:
            QueueNotFoundError: If the queue does not exist.
            ProviderError: On any other SQS error.
        """
        try:
            self._client(locator).delete_queue(QueueUrl=locator)
        except ClientError as e:
            _handle(e, f"Failed to delete queue '{locator}'")
        except TRANSPORT_ERRORS as e:
            raise ProviderUnavailableError(f"Failed to delete queue '{locator}'") from e

    def set_attributes(self, locator: str, config: DesiredConfig) -> None:
        attrs = to_sqs_attributes(config.attributes, for_update=True)
        if not attrs:
            return
        try:
            self._client(locator).set_queue_attributes(QueueUrl=locator, Attributes=attrs)
        except ClientError as e:
            _handle(e, f"Failed to update queue '{locator}'")
        except TRANSPORT_ERRORS as e:
            raise ProviderUnavailableError(f"Failed to update queue '{locator}'") from e
