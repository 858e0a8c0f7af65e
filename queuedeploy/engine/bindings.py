"""Binding Manager: creates and tolerantly removes function trigger bindings."""

from __future__ import annotations

from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from queuedeploy.base.exceptions import BindingNotFoundError
from queuedeploy.base.logger import DeployLogger, qd_logger
from queuedeploy.base.providers import BindingProvider

_MAX_WORKERS = 8


class BindingManager:
    """Wraps a :class:`BindingProvider` with the deletion policy of the engine.

    A binding that is already gone counts as deleted; every other failure
    propagates.
    """

    def __init__(self, provider: BindingProvider, log: DeployLogger | None = None) -> None:
        self.provider = provider
        self.log = log or qd_logger

    def create(self, function_ref: str, queue_identity: str, batch_size: int) -> str:
        """Bind *function_ref* to the queue and return the new binding id.

        Raises:
            BindingConflictError: If the provider already holds an
                incompatible binding for this pair.
        """
        binding_id = self.provider.create(function_ref, queue_identity, batch_size)
        self.log.info(
            f"Created binding for function {function_ref} (batch size {batch_size})",
            operation="create_binding",
            resource=binding_id,
        )
        return binding_id

    def delete(self, binding_id: str) -> None:
        try:
            self.provider.delete(binding_id)
        except BindingNotFoundError:
            self.log.info(
                "Binding already gone",
                operation="delete_binding",
                resource=binding_id,
            )
            return
        self.log.info("Deleted binding", operation="delete_binding", resource=binding_id)

    def delete_all(self, binding_ids: Iterable[str]) -> None:
        """Delete independent bindings concurrently and wait for all of them.

        Every delete is attempted; the first failure is re-raised once all
        have finished.
        """
        ids = list(dict.fromkeys(binding_ids))
        if not ids:
            return
        if len(ids) == 1:
            self.delete(ids[0])
            return
        with ThreadPoolExecutor(max_workers=min(_MAX_WORKERS, len(ids))) as pool:
            futures = [pool.submit(self.delete, binding_id) for binding_id in ids]
        errors = [f.exception() for f in futures if f.exception() is not None]
        if errors:
            raise errors[0]
