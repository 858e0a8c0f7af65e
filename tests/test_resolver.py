"""Tests for the config resolver."""

from unittest.mock import MagicMock

import pytest

from queuedeploy.aws.naming import SqsAddressing
from queuedeploy.base.exceptions import AuthError, InvalidConfigError
from queuedeploy.base.providers import IdentityProvider
from queuedeploy.engine.resolver import (
    DEFAULTS,
    ConfigResolver,
    merge_deep,
    resolve,
    validate,
)

from conftest import ACCOUNT, arn, url


class TestMergeDeep:
    def test_inputs_win(self):
        assert merge_deep({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_nested_maps_merge(self):
        left = {"redrivePolicy": {"maxReceiveCount": 3, "deadLetterTargetArn": "x"}}
        right = {"redrivePolicy": {"maxReceiveCount": 5}}
        assert merge_deep(left, right) == {
            "redrivePolicy": {"maxReceiveCount": 5, "deadLetterTargetArn": "x"}
        }

    def test_lists_are_replaced(self):
        assert merge_deep({"tags": [1, 2]}, {"tags": [3]}) == {"tags": [3]}

    def test_does_not_mutate_inputs(self):
        left = {"a": {"b": 1}}
        merge_deep(left, {"a": {"c": 2}})
        assert left == {"a": {"b": 1}}


class TestValidate:
    def test_defaults(self):
        desired = validate(DEFAULTS, {})
        assert desired.name == "serverless"
        assert desired.region == "eu-central-1"
        assert desired.batch_size == 1
        assert desired.function_ref is None

    def test_camel_case_aliases(self):
        desired = validate(DEFAULTS, {"batchSize": 7, "functionRef": "fn"})
        assert desired.batch_size == 7
        assert desired.function_ref == "fn"

    def test_spread_attributes(self):
        desired = validate(
            DEFAULTS,
            {"visibilityTimeout": 30, "attributes": {"delaySeconds": 5}},
        )
        assert desired.attributes == {"visibilityTimeout": 30, "delaySeconds": 5}

    def test_derived_keys_are_ignored(self):
        desired = validate(DEFAULTS, {"arn": "spoofed", "url": "spoofed"})
        assert desired.attributes == {}

    def test_empty_function_ref_is_unset(self):
        assert validate(DEFAULTS, {"functionRef": ""}).function_ref is None

    @pytest.mark.parametrize(
        "inputs",
        [{"name": ""}, {"name": "   "}, {"region": ""}, {"batchSize": 0}, {"batchSize": 10001}],
    )
    def test_invalid(self, inputs):
        with pytest.raises(InvalidConfigError):
            validate(DEFAULTS, inputs)

    def test_attributes_must_be_mapping(self):
        with pytest.raises(InvalidConfigError):
            validate(DEFAULTS, {"attributes": ["nope"]})


class TestResolve:
    def test_identity_and_locator(self):
        desired = resolve(DEFAULTS, {"name": "orders"}, ACCOUNT, SqsAddressing())
        assert desired.identity == arn("orders")
        assert desired.locator == url("orders")

    def test_deterministic(self):
        a = resolve(DEFAULTS, {"name": "orders"}, ACCOUNT, SqsAddressing())
        b = resolve(DEFAULTS, {"name": "orders"}, ACCOUNT, SqsAddressing())
        assert a == b


class TestConfigResolver:
    def test_looks_up_account(self):
        identity = MagicMock(spec=IdentityProvider)
        identity.account_id.return_value = ACCOUNT
        desired = ConfigResolver(identity, SqsAddressing()).resolve({"name": "orders"})
        assert desired.locator == url("orders")
        identity.account_id.assert_called_once()

    def test_invalid_input_skips_account_lookup(self):
        identity = MagicMock(spec=IdentityProvider)
        with pytest.raises(InvalidConfigError):
            ConfigResolver(identity, SqsAddressing()).resolve({"name": ""})
        identity.account_id.assert_not_called()

    def test_auth_error_propagates(self):
        identity = MagicMock(spec=IdentityProvider)
        identity.account_id.side_effect = AuthError("no creds")
        with pytest.raises(AuthError):
            ConfigResolver(identity, SqsAddressing()).resolve({"name": "orders"})

    def test_custom_defaults(self):
        identity = MagicMock(spec=IdentityProvider)
        identity.account_id.return_value = ACCOUNT
        resolver = ConfigResolver(identity, SqsAddressing(), {"name": "jobs", "region": "us-east-1"})
        assert resolver.resolve({}).locator == url("jobs", "us-east-1")
