"""S3-backed state store."""

from __future__ import annotations

from typing import NoReturn

from botocore.exceptions import ClientError
from pydantic import ValidationError

from queuedeploy.aws.clients import TRANSPORT_ERRORS, aws_client, error_code
from queuedeploy.base.config import AWSConfig
from queuedeploy.base.exceptions import StateStoreError
from queuedeploy.base.models import PersistedState
from queuedeploy.base.state import StateStore

_MISSING_CODES = frozenset({"NoSuchKey", "404"})


def _handle(e: Exception, msg: str) -> NoReturn:
    raise StateStoreError(msg) from e


class S3StateStore(StateStore):
    """One JSON object per key at ``s3://<bucket>/<prefix><key>.json``.

    The bucket must already exist.
    """

    def __init__(
        self,
        config: AWSConfig,
        bucket: str,
        prefix: str = "queuedeploy/",
        region_name: str | None = None,
    ) -> None:
        self.config = config
        self.bucket = bucket
        self.prefix = prefix
        self.region_name = region_name

    def _object_key(self, key: str) -> str:
        return f"{self.prefix}{key}.json"

    def load(self, key: str) -> PersistedState:
        object_key = self._object_key(key)
        try:
            resp = aws_client("s3", self.config, self.region_name).get_object(
                Bucket=self.bucket, Key=object_key
            )
            body = resp["Body"].read()
        except ClientError as e:
            if error_code(e) in _MISSING_CODES:
                return PersistedState()
            _handle(e, f"Failed to read state 's3://{self.bucket}/{object_key}'")
        except TRANSPORT_ERRORS as e:
            _handle(e, f"Failed to read state 's3://{self.bucket}/{object_key}'")
        try:
            return PersistedState.model_validate_json(body)
        except ValidationError as e:
            _handle(e, f"Corrupt state 's3://{self.bucket}/{object_key}'")

    def save(self, key: str, state: PersistedState) -> None:
        object_key = self._object_key(key)
        try:
            aws_client("s3", self.config, self.region_name).put_object(
                Bucket=self.bucket,
                Key=object_key,
                Body=state.model_dump_json().encode("utf-8"),
                ContentType="application/json",
            )
        except (ClientError, *TRANSPORT_ERRORS) as e:
            _handle(e, f"Failed to write state 's3://{self.bucket}/{object_key}'")
