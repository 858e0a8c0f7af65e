"""
Pydantic models for provider credentials.

A component validates its credential config once, when it is built, so
a typo in a key fails fast instead of surfacing as an SDK error in the
middle of a reconciliation run.
"""

from __future__ import annotations

import os
from typing import Any
from pydantic import BaseModel, ConfigDict, model_validator

# Field -> environment variables consulted in order when the field is unset.
_AWS_ENV_FALLBACKS: dict[str, tuple[str, ...]] = {
    "aws_access_key_id": ("AWS_ACCESS_KEY_ID",),
    "aws_secret_access_key": ("AWS_SECRET_ACCESS_KEY",),
    "aws_session_token": ("AWS_SESSION_TOKEN",),
    "region_name": ("AWS_DEFAULT_REGION", "AWS_REGION"),
}


class AWSConfig(BaseModel):
    """Credentials and fallback region for the boto3 clients.

    Unset fields are filled from the environment; whatever is still unset
    is left to boto3's own credential chain (profiles, instance metadata).
    ``region_name`` only serves calls that are not tied to a queue region,
    such as the state bucket and the account lookup.
    """

    model_config = ConfigDict(extra="forbid")

    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_session_token: str | None = None
    region_name: str | None = None

    @model_validator(mode="before")
    @classmethod
    def fill_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        for field, env_vars in _AWS_ENV_FALLBACKS.items():
            if values.get(field):
                continue
            values[field] = next(
                (os.environ[var] for var in env_vars if os.environ.get(var)), None
            )
        return values

    def client_kwargs(self, region_name: str | None = None) -> dict[str, Any]:
        """Keyword arguments for ``boto3.client`` bound to *region_name*."""
        kwargs = self.model_dump(exclude={"region_name"})
        kwargs["region_name"] = region_name or self.region_name
        return kwargs


CONFIG_REGISTRY: dict[str, type[BaseModel]] = {
    "aws": AWSConfig,
}


def validate_config(cloud_provider: str, config: dict) -> BaseModel:
    """Return the typed credential model for *cloud_provider*.

    Raises:
        ValueError: If no model is registered for the provider.
        pydantic.ValidationError: If *config* does not fit the model.
    """
    try:
        model = CONFIG_REGISTRY[cloud_provider]
    except KeyError:
        raise ValueError(f"No config model registered for provider: {cloud_provider}") from None
    return model(**config)


__all__ = [
    "AWSConfig",
    "CONFIG_REGISTRY",
    "validate_config",
]
