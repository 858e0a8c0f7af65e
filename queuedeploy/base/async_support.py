"""
Async entry points for components.

Reconciliation is synchronous request/response work.  ``AsyncMixin``
adds ``a<name>`` coroutine twins for the methods a class lists in
``__async_methods__``; each one runs the synchronous method in a worker
thread via :func:`asyncio.to_thread`, so an event loop is never blocked
on provider calls.
"""

from __future__ import annotations

import asyncio
import functools
from typing import Any, Callable, Coroutine, TypeVar

T = TypeVar("T")


def async_wrap(
    fn: Callable[..., T],
) -> Callable[..., Coroutine[Any, Any, T]]:
    """Return an async version of *fn* that runs it in a thread."""

    @functools.wraps(fn)
    async def _wrapper(*args: Any, **kwargs: Any) -> T:
        return await asyncio.to_thread(fn, *args, **kwargs)

    return _wrapper


class AsyncMixin:
    """Mixin that generates ``a<method>`` coroutines for listed methods.

    Example::

        class QueueComponent(AsyncMixin):
            __async_methods__ = ("deploy",)

            def deploy(self, inputs): ...
            # => await component.adeploy(inputs)
    """

    __async_methods__: tuple[str, ...] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for name in cls.__async_methods__:
            attr = getattr(cls, name, None)
            if attr is None or not callable(attr):
                raise TypeError(f"{cls.__name__}.{name} is not a method")
            async_name = f"a{name}"
            if async_name not in vars(cls):
                setattr(cls, async_name, async_wrap(attr))
