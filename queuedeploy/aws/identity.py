"""AWS STS implementation of the identity blueprint."""

from __future__ import annotations

from botocore.exceptions import ClientError, NoCredentialsError, PartialCredentialsError

from queuedeploy.aws.clients import TRANSPORT_ERRORS, aws_client
from queuedeploy.base.config import AWSConfig
from queuedeploy.base.exceptions import AuthError, ProviderUnavailableError
from queuedeploy.base.providers import IdentityProvider


class StsIdentity(IdentityProvider):
    """Looks up the account id with ``sts:GetCallerIdentity``.

    The result is cached for the lifetime of the instance.
    """

    def __init__(self, config: AWSConfig, region_name: str | None = None) -> None:
        self.config = config
        self.region_name = region_name
        self._account_id: str | None = None

    def account_id(self) -> str:
        if self._account_id is None:
            client = aws_client("sts", self.config, self.region_name)
            try:
                self._account_id = client.get_caller_identity()["Account"]
            except (NoCredentialsError, PartialCredentialsError) as e:
                raise AuthError("No usable AWS credentials found") from e
            except ClientError as e:
                raise AuthError("Failed to resolve AWS account identity") from e
            except TRANSPORT_ERRORS as e:
                raise ProviderUnavailableError("STS is unreachable") from e
        return self._account_id
