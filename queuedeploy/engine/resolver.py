"""Config Resolver.

Merges caller inputs over defaults and derives the queue's identity and
locator.  Validation runs before the account lookup so bad input never
reaches a provider.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from queuedeploy.base.exceptions import InvalidConfigError
from queuedeploy.base.models import DesiredConfig, DesiredInputs
from queuedeploy.base.providers import Addressing, IdentityProvider

DEFAULTS: dict[str, Any] = {
    "name": "serverless",
    "region": "eu-central-1",
}

# camelCase and legacy spellings accepted from callers
_KEY_ALIASES = {
    "batchSize": "batch_size",
    "functionRef": "function_ref",
    "functionName": "function_ref",
    "function_name": "function_ref",
}
_FIELD_KEYS = frozenset({"name", "region", "batch_size", "function_ref", "attributes"})
# Derived by the resolver, ignored when supplied.
_DERIVED_KEYS = frozenset({"identity", "locator", "arn", "url"})


def merge_deep(left: Mapping[str, Any], right: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *right* over *left*; nested mappings merge, anything else is replaced."""
    merged = dict(left)
    for key, value in right.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = merge_deep(current, value)
        else:
            merged[key] = value
    return merged


def _split_fields(raw: Mapping[str, Any]) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    spread: dict[str, Any] = {}
    for key, value in raw.items():
        key = _KEY_ALIASES.get(key, key)
        if key in _DERIVED_KEYS:
            continue
        if key in _FIELD_KEYS:
            fields[key] = value
        else:
            spread[key] = value

    explicit = fields.get("attributes") or {}
    if not isinstance(explicit, Mapping):
        raise InvalidConfigError("'attributes' must be a mapping")
    fields["attributes"] = merge_deep(spread, explicit)

    if not fields.get("function_ref"):
        fields["function_ref"] = None
    if fields.get("batch_size") is None:
        fields.pop("batch_size", None)
    return fields


def validate(defaults: Mapping[str, Any], inputs: Mapping[str, Any]) -> DesiredInputs:
    """Merge *inputs* over *defaults* and validate the result.

    Raises:
        InvalidConfigError: If the name or region resolve to empty, or a
            field has the wrong type or range.
    """
    merged = merge_deep(defaults, inputs)
    fields = _split_fields(merged)
    try:
        return DesiredInputs(**fields)
    except ValidationError as e:
        raise InvalidConfigError(f"Invalid queue configuration: {e}") from e


def resolve(
    defaults: Mapping[str, Any],
    inputs: Mapping[str, Any],
    account_id: str,
    addressing: Addressing,
) -> DesiredConfig:
    """Build the :class:`DesiredConfig` for *account_id*.

    Pure: calling it twice with the same arguments yields equal results.
    """
    desired = validate(defaults, inputs)
    return DesiredConfig(
        **desired.model_dump(),
        identity=addressing.identity(account_id, desired.name, desired.region),
        locator=addressing.locator(account_id, desired.name, desired.region),
    )


class ConfigResolver:
    """Resolves inputs against the caller's account."""

    def __init__(
        self,
        identity_provider: IdentityProvider,
        addressing: Addressing,
        defaults: Mapping[str, Any] | None = None,
    ) -> None:
        self.identity_provider = identity_provider
        self.addressing = addressing
        self.defaults = dict(DEFAULTS if defaults is None else defaults)

    def resolve(self, inputs: Mapping[str, Any]) -> DesiredConfig:
        # Fail on bad input before the first provider call.
        validate(self.defaults, inputs)
        account_id = self.identity_provider.account_id()
        return resolve(self.defaults, inputs, account_id, self.addressing)
