"""SQS addressing scheme.

Queue ARNs and URLs are pure functions of account, queue name and
region, so they can be recomputed at any time and compared against the
recorded state.
"""

from __future__ import annotations

from urllib.parse import urlparse

from queuedeploy.base.providers import Addressing


def partition_for(region: str) -> str:
    if region.startswith("cn-"):
        return "aws-cn"
    if region.startswith("us-gov-"):
        return "aws-us-gov"
    return "aws"


def domain_for(region: str) -> str:
    return "amazonaws.com.cn" if region.startswith("cn-") else "amazonaws.com"


def queue_arn(account_id: str, name: str, region: str) -> str:
    return f"arn:{partition_for(region)}:sqs:{region}:{account_id}:{name}"


def queue_url(account_id: str, name: str, region: str) -> str:
    return f"https://sqs.{region}.{domain_for(region)}/{account_id}/{name}"


def region_from_url(url: str) -> str | None:
    """Region encoded in a queue URL.

    Handles ``https://sqs.<region>.amazonaws.com/...`` and the legacy
    ``https://<region>.queue.amazonaws.com/...`` form.
    """
    host = urlparse(url).hostname or ""
    parts = host.split(".")
    if len(parts) >= 3 and parts[0] == "sqs":
        return parts[1]
    if len(parts) >= 3 and parts[1] == "queue":
        return parts[0]
    return None


def region_from_arn(arn: str) -> str | None:
    parts = arn.split(":")
    if len(parts) >= 6 and parts[0] == "arn" and parts[3]:
        return parts[3]
    return None


class SqsAddressing(Addressing):
    """ARN as identity, queue URL as locator."""

    def identity(self, account_id: str, name: str, region: str) -> str:
        return queue_arn(account_id, name, region)

    def locator(self, account_id: str, name: str, region: str) -> str:
        return queue_url(account_id, name, region)
