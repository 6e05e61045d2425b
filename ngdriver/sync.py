"""
Synchronization hook for ngdriver wrappers.

Wrapper classes (NgDriver, NgElement, NgNavigation) forward almost every
member to the object they wrap. The ``synchronized`` decorator adds the one
extra step: block until Angular is stable before the forwarded call runs.

Each wrapper provides ``_sync()``, which performs the wait (or does nothing
when synchronization is disabled).
"""

from __future__ import annotations

import functools
from typing import Any, Callable, TypeVar

R = TypeVar("R")


def synchronized(func: Callable[..., R]) -> Callable[..., R]:
    """Run ``self._sync()`` before the decorated method.

    Works on plain methods and on property getters:

        class NgElement:
            @property
            @synchronized
            def text(self) -> str:
                return self._element.text

            @synchronized
            def click(self) -> None:
                self._element.click()
    """

    @functools.wraps(func)
    def wrapper(self: Any, *args: Any, **kwargs: Any) -> R:
        self._sync()
        return func(self, *args, **kwargs)

    wrapper.__synchronized__ = True  # type: ignore[attr-defined]
    return wrapper


__all__ = ["synchronized"]
