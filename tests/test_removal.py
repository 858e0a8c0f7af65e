"""Tests for the removal path."""

from unittest.mock import MagicMock

import pytest

from queuedeploy.aws.naming import SqsAddressing
from queuedeploy.base.exceptions import ProviderError, ProviderUnavailableError
from queuedeploy.base.models import Binding, PersistedState
from queuedeploy.base.providers import IdentityProvider, ProviderSet
from queuedeploy.component import QueueComponent
from queuedeploy.stores import MemoryStateStore

from conftest import ACCOUNT, FakeBindings, FakeQueues, arn, url


class TestRemove:
    def test_removes_binding_then_queue_then_clears_state(self, world):
        world.component.deploy({"name": "orders", "functionRef": "fn-a"})
        world.calls.reset_mock()

        assert world.component.remove({}) == {}

        assert world.mutations() == ["bindings.delete", "queues.delete"]
        world.bindings.list.assert_called_once_with("fn-a")
        world.bindings.delete.assert_called_once_with("uuid-1")
        world.queues.delete.assert_called_once_with(url("orders"))
        assert world.store.load("orders").is_empty
        assert world.fake_queues.live == {}

    def test_after_region_change_deletes_queue_in_new_region(self, world):
        world.component.deploy({"name": "orders", "functionRef": "fn-a"})
        world.component.deploy({"name": "orders", "region": "us-east-1", "functionRef": "fn-a"})
        world.calls.reset_mock()

        world.component.remove({})

        assert world.mutations() == ["bindings.delete", "queues.delete"]
        world.queues.delete.assert_called_once_with(url("orders", "us-east-1"))
        assert world.store.load("orders").is_empty

    def test_cold_removal_skips_bindings(self, world):
        assert world.component.remove({}) == {}

        world.bindings.delete.assert_not_called()
        world.bindings.list.assert_not_called()
        # Falls back to the default name and region.
        world.queues.delete.assert_called_once_with(url("serverless"))
        assert world.store.load("orders").is_empty

    def test_cold_removal_uses_input_name(self, world):
        world.component.remove({"name": "orders", "region": "us-east-1"})
        world.queues.delete.assert_called_once_with(url("orders", "us-east-1"))

    def test_already_deleted_resources_are_tolerated(self, world):
        world.component.deploy({"name": "orders", "functionRef": "fn-a"})
        world.fake_bindings.live.clear()
        world.fake_queues.live.clear()

        world.component.remove({})

        assert world.store.load("orders").is_empty

    def test_unrelated_bindings_are_left_alone(self, world):
        world.component.deploy({"name": "orders", "functionRef": "fn-a"})
        world.fake_bindings.live["other"] = Binding(
            binding_id="other",
            function_ref="fn-a",
            queue_identity=arn("payments"),
        )
        world.calls.reset_mock()

        world.component.remove({})

        world.bindings.delete.assert_called_once_with("uuid-1")
        assert list(world.fake_bindings.live) == ["other"]

    def test_failed_queue_delete_keeps_queue_in_state(self, world):
        world.component.deploy({"name": "orders", "functionRef": "fn-a"})
        world.queues.delete.side_effect = ProviderUnavailableError("timeout")

        with pytest.raises(ProviderUnavailableError):
            world.component.remove({})

        state = world.store.load("orders")
        assert state.locator == url("orders")
        # The binding delete completed and is committed.
        assert state.binding_id is None

    def test_failed_binding_delete_aborts_before_queue(self, world):
        world.component.deploy({"name": "orders", "functionRef": "fn-a"})
        world.bindings.delete.side_effect = ProviderError("access denied")
        world.calls.reset_mock()

        with pytest.raises(ProviderError):
            world.component.remove({})

        world.queues.delete.assert_not_called()
        assert world.store.load("orders").binding_id == "uuid-1"

    def test_remove_then_deploy_starts_fresh(self, world):
        world.component.deploy({"name": "orders"})
        world.component.remove({})
        world.calls.reset_mock()

        world.component.deploy({"name": "orders"})

        assert world.mutations() == ["queues.create"]

    def test_state_without_locator_derives_it(self, world):
        world.store.save("orders", PersistedState(name="orders", region="eu-central-1"))

        world.component.remove({})

        world.identity.account_id.assert_called_once()
        world.queues.delete.assert_called_once_with(url("orders"))


class TestRemoveAcrossRegions:
    """Each region gets its own binding fake, as Lambda endpoints are regional."""

    @pytest.fixture
    def regional(self):
        queues = MagicMock(wraps=FakeQueues())
        bindings = {
            "eu-central-1": MagicMock(wraps=FakeBindings()),
            "us-east-1": MagicMock(wraps=FakeBindings()),
        }
        identity = MagicMock(spec=IdentityProvider)
        identity.account_id.return_value = ACCOUNT

        def factory(region):
            return ProviderSet(identity, queues, bindings[region], SqsAddressing())

        store = MemoryStateStore()
        return QueueComponent(factory, store, key="orders"), store, queues, bindings

    def test_binding_stranded_by_interrupted_move_is_removed_in_its_region(self, regional):
        component, store, queues, bindings = regional
        eu, us = bindings["eu-central-1"], bindings["us-east-1"]
        component.deploy({"name": "orders", "functionRef": "fn-a"})
        eu.delete.side_effect = ProviderUnavailableError("throttled")

        with pytest.raises(ProviderUnavailableError):
            component.deploy({"name": "orders", "region": "us-east-1", "functionRef": "fn-a"})

        half_done = store.load("orders")
        assert half_done.region == "us-east-1"
        assert half_done.binding_region == "eu-central-1"

        eu.delete.side_effect = None
        component.remove({})

        eu.delete.assert_called_once_with("uuid-1")
        us.delete.assert_not_called()
        assert eu.list("fn-a") == []
        queues.delete.assert_called_with(url("orders", "us-east-1"))
        assert store.load("orders").is_empty

    def test_redeploy_moves_binding_out_of_old_region(self, regional):
        component, store, _, bindings = regional
        eu, us = bindings["eu-central-1"], bindings["us-east-1"]
        component.deploy({"name": "orders", "functionRef": "fn-a"})
        eu.delete.side_effect = ProviderUnavailableError("throttled")
        with pytest.raises(ProviderUnavailableError):
            component.deploy({"name": "orders", "region": "us-east-1", "functionRef": "fn-a"})
        eu.delete.side_effect = None

        component.deploy({"name": "orders", "region": "us-east-1", "functionRef": "fn-a"})

        assert eu.list("fn-a") == []
        assert [b.queue_identity for b in us.list("fn-a")] == [arn("orders", "us-east-1")]
        assert store.load("orders").binding_region == "us-east-1"
