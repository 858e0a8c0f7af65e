"""
SDK client cache.

A run may talk to two regions (a replaced queue lives in the old one),
and the removal fan-out calls the binding provider from worker threads.
Clients are therefore shared per service + region + credentials.
"""

from __future__ import annotations

import hashlib
import json
import threading
from typing import Any, Callable


class ClientCache:
    """Thread-safe, in-process cache for SDK clients keyed by service, region and credentials."""

    _instance: ClientCache | None = None
    _cache: dict[str, Any]
    _lock: threading.Lock

    def __new__(cls) -> ClientCache:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._cache = {}
            cls._instance._lock = threading.Lock()
        return cls._instance

    @staticmethod
    def _make_key(service_name: str, region_name: str | None, credentials: dict) -> str:
        """Produce a deterministic cache key; secrets only enter as a digest."""
        serialised = json.dumps(
            {"service": service_name, "region": region_name, "credentials": credentials},
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(serialised.encode()).hexdigest()

    def get_or_create(
        self,
        service_name: str,
        region_name: str | None,
        credentials: dict,
        factory: Callable[[], Any],
    ) -> Any:
        """Return a cached client or create one via *factory*.

        Args:
            service_name: SDK service name (e.g. 'sqs').
            region_name: Region the client is bound to.
            credentials: Credential fields the client was built from.
            factory: Zero-argument callable that builds a new client.

        Returns:
            The cached (or newly-created) client.
        """
        key = self._make_key(service_name, region_name, credentials)
        with self._lock:
            if key not in self._cache:
                self._cache[key] = factory()
            return self._cache[key]

    def clear(self) -> None:
        """Flush all cached clients."""
        with self._lock:
            self._cache.clear()
