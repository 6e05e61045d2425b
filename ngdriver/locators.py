"""
Script-backed locators for ngdriver.

A ScriptBy finds elements by running a client-side script instead of a native
selector. Callers such as NgDriver and NgElement append context arguments
(root selector, scoping element) per call, so a single locator instance can
be shared freely.

Example:
    from ngdriver import NgBy

    rows = driver.find_elements(NgBy.repeater("item in items"))
    name = rows[0].find_element(NgBy.binding("item.name")).text
    driver.find_element(NgBy.model("user.email")).send_keys("a@b.c")
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from selenium.webdriver.remote.webelement import WebElement

from ngdriver.exceptions import NoSuchElementError, UnsupportedExecutionContextError
from ngdriver.scripts import (
    FIND_ALL_REPEATER_ROWS,
    FIND_BINDINGS,
    FIND_MODEL,
    FIND_SELECTED_OPTIONS,
    ScriptEntry,
)

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = "ngdriver.ScriptBy"

# Attributes through which a context may expose the driver it belongs to.
# ``wrapped_driver`` covers wrapper drivers, ``parent`` covers WebElement.
_DRIVER_ATTRIBUTES = ("wrapped_driver", "parent")


def _can_execute(obj: Any) -> bool:
    return obj is not None and callable(getattr(obj, "execute_script", None))


def script_executor(context: Any) -> Any:
    """Find an object able to run ``execute_script`` for a search context.

    Raises:
        UnsupportedExecutionContextError: If neither the context nor the
            driver it wraps can execute scripts.
    """
    if _can_execute(context):
        return context
    for attribute in _DRIVER_ATTRIBUTES:
        inner = getattr(context, attribute, None)
        if _can_execute(inner):
            return inner
    raise UnsupportedExecutionContextError(
        f"Could not get a script executor from the context: {context!r}"
    )


class ScriptBy:
    """Locator that matches elements by executing a script.

    Args:
        script: Script text, or a catalog entry.
        *args: Primary script arguments, passed first.
        description: Human readable name used in errors and ``repr``.
    """

    supports_context_injection = True

    def __init__(
        self,
        script: str | ScriptEntry,
        *args: Any,
        description: Optional[str] = None,
    ) -> None:
        self._script = script.source if isinstance(script, ScriptEntry) else script
        self._args = tuple(args)
        self._description = description or DEFAULT_DESCRIPTION

    @property
    def script(self) -> str:
        """Get the script text."""
        return self._script

    @property
    def args(self) -> tuple[Any, ...]:
        """Get the primary script arguments."""
        return self._args

    @property
    def description(self) -> str:
        """Get the locator description."""
        return self._description

    def script_args(self, extra_args: Sequence[Any] = ()) -> list[Any]:
        """Build the final argument list: primary args, then extra args."""
        return [*self._args, *extra_args]

    def find_elements(
        self,
        context: Any,
        extra_args: Sequence[Any] = (),
    ) -> list[WebElement]:
        """Find all elements matching the script.

        Args:
            context: Driver, wrapper driver or element to search from.
            extra_args: Arguments appended after the primary arguments.

        Returns:
            Matching elements, or an empty list when the script returns
            anything other than a sequence of elements.
        """
        executor = script_executor(context)
        result = executor.execute_script(self._script, *self.script_args(extra_args))

        if not isinstance(result, (list, tuple)):
            return []
        if not all(isinstance(item, WebElement) for item in result):
            logger.debug(f"{self._description} returned non-element values, ignoring")
            return []
        return list(result)

    def find_element(
        self,
        context: Any,
        extra_args: Sequence[Any] = (),
    ) -> WebElement:
        """Find the first element matching the script.

        Raises:
            NoSuchElementError: If nothing matches.
        """
        elements = self.find_elements(context, extra_args)
        if not elements:
            raise NoSuchElementError(f"Unable to locate element: {{ {self._description} }}.")
        return elements[0]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScriptBy):
            return NotImplemented
        return self._script == other._script and self._args == other._args

    def __hash__(self) -> int:
        return hash((self._script, self._args))

    def __repr__(self) -> str:
        return f"ScriptBy({self._description!r}, args={self._args!r})"


class NgBy:
    """Factory for Angular-aware locators."""

    @staticmethod
    def binding(binding: str) -> ScriptBy:
        """Find elements whose ``{{binding}}`` or ng-bind contains the text."""
        return ScriptBy(
            FIND_BINDINGS, binding, False, description=f"NgBy.binding: {binding}"
        )

    @staticmethod
    def exact_binding(binding: str) -> ScriptBy:
        """Find elements whose binding matches the text exactly."""
        return ScriptBy(
            FIND_BINDINGS, binding, True, description=f"NgBy.exact_binding: {binding}"
        )

    @staticmethod
    def model(model: str) -> ScriptBy:
        """Find elements bound with ``ng-model``."""
        return ScriptBy(FIND_MODEL, model, description=f"NgBy.model: {model}")

    @staticmethod
    def repeater(repeater: str) -> ScriptBy:
        """Find all rows of an ``ng-repeat`` containing the text."""
        return ScriptBy(
            FIND_ALL_REPEATER_ROWS,
            repeater,
            False,
            description=f"NgBy.repeater: {repeater}",
        )

    @staticmethod
    def exact_repeater(repeater: str) -> ScriptBy:
        """Find all rows of an ``ng-repeat`` whose expression matches exactly."""
        return ScriptBy(
            FIND_ALL_REPEATER_ROWS,
            repeater,
            True,
            description=f"NgBy.exact_repeater: {repeater}",
        )

    @staticmethod
    def selected_option(model: str) -> ScriptBy:
        """Find the checked options of a ``select`` bound with ``ng-model``."""
        return ScriptBy(
            FIND_SELECTED_OPTIONS, model, description=f"NgBy.selected_option: {model}"
        )


def supports_context_injection(locator: Any) -> bool:
    """Check whether a locator accepts root/element context arguments."""
    return bool(getattr(locator, "supports_context_injection", False))


__all__ = [
    "DEFAULT_DESCRIPTION",
    "NgBy",
    "ScriptBy",
    "script_executor",
    "supports_context_injection",
]
