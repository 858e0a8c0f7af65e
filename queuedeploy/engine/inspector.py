"""Remote Inspector: read-only view of the provider."""

from __future__ import annotations

from queuedeploy.base.exceptions import BindingNotFoundError, QueueNotFoundError
from queuedeploy.base.logger import DeployLogger, qd_logger
from queuedeploy.base.models import Binding, RemoteQueue
from queuedeploy.base.providers import BindingProvider, QueueProvider


class RemoteInspector:
    """Existence checks for queues and binding listings.

    Absence is a normal result.  Only transport and auth failures
    propagate.
    """

    def __init__(
        self,
        queues: QueueProvider,
        bindings: BindingProvider,
        log: DeployLogger | None = None,
    ) -> None:
        self.queues = queues
        self.bindings = bindings
        self.log = log or qd_logger

    def fetch_queue(self, locator: str) -> RemoteQueue | None:
        try:
            remote = self.queues.get(locator)
        except QueueNotFoundError:
            remote = None
        self.log.debug(
            "Queue present" if remote else "Queue absent",
            operation="fetch_queue",
            resource=locator,
        )
        return remote

    def list_bindings(self, function_ref: str) -> list[Binding]:
        """Bindings of *function_ref*; empty when the function itself is gone."""
        try:
            found = list(self.bindings.list(function_ref))
        except BindingNotFoundError:
            found = []
        self.log.debug(
            f"Found {len(found)} binding(s) for function",
            operation="list_bindings",
            resource=function_ref,
        )
        return found
