"""Reconciler: converges one queue and its optional trigger binding.

Deploy is split in two halves:

* :func:`plan_deploy` is pure.  It compares desired configuration, the
  persisted state and the remote snapshot and returns the ordered
  operations to run.
* :meth:`Reconciler.deploy` applies the operations one by one and saves
  the state after every completed step, so an interrupted run leaves the
  store describing exactly what was done.

Removal is driven by the persisted state, not by desired configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from queuedeploy.base.exceptions import InconsistentStateError, QueueNotFoundError
from queuedeploy.base.logger import DeployLogger, new_request_id, qd_logger
from queuedeploy.base.models import DesiredConfig, PersistedState, RemoteQueue
from queuedeploy.base.providers import ProviderFactory, QueueProvider
from queuedeploy.base.state import StateStore
from queuedeploy.engine.bindings import BindingManager
from queuedeploy.engine.inspector import RemoteInspector


_UNBOUND = {
    "bound_function": None,
    "binding_id": None,
    "binding_queue": None,
    "binding_region": None,
}


class ChangeType(Enum):
    """Kind of provider mutation."""

    CREATE_QUEUE = "create_queue"
    UPDATE_QUEUE = "update_queue"
    DELETE_QUEUE = "delete_queue"
    CREATE_BINDING = "create_binding"
    DELETE_BINDING = "delete_binding"


@dataclass(frozen=True)
class Operation:
    """One planned step.

    ``target`` is the queue locator, the binding id to delete, or the
    function to bind.  ``region`` is where the target lives.
    """

    change_type: ChangeType
    target: str
    region: str


def plan_deploy(
    desired: DesiredConfig,
    prior: PersistedState,
    remote: RemoteQueue | None,
) -> list[Operation]:
    """Return the minimal ordered operations converging *prior* to *desired*.

    *remote* is the snapshot of the queue at ``prior.locator`` (or at the
    desired locator when nothing is tracked).

    Raises:
        InconsistentStateError: If the tracked queue is missing remotely.
    """
    ops: list[Operation] = []

    if prior.locator is None:
        # Nothing tracked; a queue already at the address is adopted.
        change = ChangeType.UPDATE_QUEUE if remote is not None else ChangeType.CREATE_QUEUE
        ops.append(Operation(change, desired.locator, desired.region))
    elif prior.locator == desired.locator:
        if remote is None:
            raise InconsistentStateError(
                f"Queue '{prior.locator}' is recorded as deployed but does not exist; "
                "it was deleted outside of this component"
            )
        ops.append(Operation(ChangeType.UPDATE_QUEUE, desired.locator, desired.region))
    else:
        # Delete before create: the old address is released first.
        ops.append(
            Operation(ChangeType.DELETE_QUEUE, prior.locator, prior.region or desired.region)
        )
        ops.append(Operation(ChangeType.CREATE_QUEUE, desired.locator, desired.region))

    # State written before binding_queue existed only knows the queue identity.
    bound_queue = prior.binding_queue or prior.identity
    queue_moved = prior.binding_id is not None and bound_queue != desired.identity
    if prior.bound_function != desired.function_ref or queue_moved:
        if prior.binding_id is not None:
            ops.append(
                Operation(
                    ChangeType.DELETE_BINDING,
                    prior.binding_id,
                    prior.binding_region or prior.region or desired.region,
                )
            )
        if desired.function_ref:
            ops.append(
                Operation(ChangeType.CREATE_BINDING, desired.function_ref, desired.region)
            )
    return ops


class Reconciler:
    """Applies planned operations and commits state after each one.

    Args:
        provider_factory: Builds the collaborators for a region.
        store: Durable state store.
        key: State key of the component instance.
    """

    def __init__(self, provider_factory: ProviderFactory, store: StateStore, key: str) -> None:
        self.provider_factory = provider_factory
        self.store = store
        self.key = key

    def _run_logger(self) -> DeployLogger:
        return qd_logger.bind(component=self.key, request_id=new_request_id())

    def _commit(self, state: PersistedState) -> PersistedState:
        self.store.save(self.key, state)
        return state

    # --- deploy ---

    def deploy(self, desired: DesiredConfig, prior: PersistedState) -> PersistedState:
        """Converge the queue and binding to *desired*; return the committed state."""
        log = self._run_logger()
        if prior.locator is not None:
            providers = self.provider_factory(prior.region or desired.region)
            locator = prior.locator
        else:
            providers = self.provider_factory(desired.region)
            locator = desired.locator
        remote = RemoteInspector(providers.queues, providers.bindings, log).fetch_queue(locator)

        ops = plan_deploy(desired, prior, remote)
        log.info(
            f"Planned {', '.join(op.change_type.value for op in ops)}",
            operation="plan",
            resource=desired.locator,
        )

        state = prior
        for op in ops:
            state = self._commit(self._apply(op, desired, state, log))
        return state

    def _apply(
        self,
        op: Operation,
        desired: DesiredConfig,
        state: PersistedState,
        log: DeployLogger,
    ) -> PersistedState:
        providers = self.provider_factory(op.region)
        placed = {
            "name": desired.name,
            "region": desired.region,
            "identity": desired.identity,
            "locator": desired.locator,
        }

        log.info("Applying", operation=op.change_type.value, resource=op.target)

        if op.change_type is ChangeType.CREATE_QUEUE:
            providers.queues.create(desired)
            return state.model_copy(update=placed)

        if op.change_type is ChangeType.UPDATE_QUEUE:
            try:
                providers.queues.set_attributes(op.target, desired)
            except QueueNotFoundError as e:
                raise InconsistentStateError(
                    f"Queue '{op.target}' disappeared while its attributes were updated"
                ) from e
            return state.model_copy(update=placed)

        if op.change_type is ChangeType.DELETE_QUEUE:
            self._delete_queue(providers.queues, op.target, log)
            return state.model_copy(update={"identity": None, "locator": None})

        manager = BindingManager(providers.bindings, log)
        if op.change_type is ChangeType.DELETE_BINDING:
            manager.delete(op.target)
            return state.model_copy(update=_UNBOUND)

        binding_id = manager.create(desired.function_ref, desired.identity, desired.batch_size)
        return state.model_copy(
            update={
                "bound_function": desired.function_ref,
                "binding_id": binding_id,
                "binding_queue": desired.identity,
                "binding_region": op.region,
            }
        )

    def _delete_queue(self, queues: QueueProvider, locator: str, log: DeployLogger) -> None:
        try:
            queues.delete(locator)
        except QueueNotFoundError:
            log.info("Queue already gone", operation="delete_queue", resource=locator)

    # --- remove ---

    def remove(self, prior: PersistedState, name: str, region: str) -> PersistedState:
        """Tear down what *prior* records and commit an empty state.

        *name* and *region* only matter when no locator was recorded; the
        queue address is then derived from them.
        """
        log = self._run_logger()
        region = prior.region or region
        providers = self.provider_factory(region)

        # The binding may still live next to a queue that was since replaced.
        bindings = self.provider_factory(prior.binding_region or region).bindings

        if prior.bound_function:
            inspector = RemoteInspector(providers.queues, bindings, log)
            listed = inspector.list_bindings(prior.bound_function)
            unrelated = [b.binding_id for b in listed if b.binding_id != prior.binding_id]
            if unrelated:
                log.warning(
                    f"Leaving {len(unrelated)} binding(s) not created by this component",
                    operation="list_bindings",
                    resource=prior.bound_function,
                )

        if prior.binding_id:
            BindingManager(bindings, log).delete_all([prior.binding_id])
            self._commit(prior.model_copy(update=_UNBOUND))

        locator = prior.locator
        if locator is None:
            account_id = providers.identity.account_id()
            locator = providers.addressing.locator(account_id, name, region)
        log.info("Deleting queue", operation="delete_queue", resource=locator)
        self._delete_queue(providers.queues, locator, log)

        return self._commit(PersistedState())
