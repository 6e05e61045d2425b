"""
Synchronized element wrapper for ngdriver.

NgElement wraps a Selenium WebElement. Every accessor and action first waits
for Angular to become stable through the owning NgDriver, so an assertion or
click never races a pending digest, ``$timeout`` or ``$http`` request.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from selenium.common.exceptions import JavascriptException
from selenium.webdriver.remote.webelement import WebElement

from ngdriver.exceptions import ExpressionEvaluationError, NoSuchElementError
from ngdriver.locators import supports_context_injection
from ngdriver.scripts import EVALUATE
from ngdriver.sync import synchronized

if TYPE_CHECKING:
    from ngdriver.driver import NgDriver

logger = logging.getLogger(__name__)


def normalize_locator(by: Any, value: Optional[str]) -> tuple[Any, Optional[str]]:
    """Accept ``(by, value)`` tuples as well as separate arguments."""
    if value is None and isinstance(by, tuple) and len(by) == 2:
        return by[0], by[1]
    return by, value


def describe_locator(by: Any, value: Optional[str]) -> str:
    """Render a locator for error messages."""
    if supports_context_injection(by):
        return getattr(by, "description", repr(by))
    return f"{by}={value!r}"


class NgElement:
    """Angular-aware wrapper around a WebElement.

    Instances are created by NgDriver and by other NgElements; there is
    normally no need to construct one directly.

    Example:
        name = driver.find_element(NgBy.model("user.name"))
        name.clear()
        name.send_keys("Ada")
        assert name.evaluate("user.name") == "Ada"
    """

    def __init__(self, ng_driver: "NgDriver", element: WebElement) -> None:
        self._ng_driver = ng_driver
        self._element = element

    @property
    def ng_driver(self) -> "NgDriver":
        """Get the NgDriver this element belongs to."""
        return self._ng_driver

    @property
    def wrapped_element(self) -> WebElement:
        """Get the wrapped WebElement."""
        return self._element

    def _sync(self) -> None:
        self._ng_driver.wait_for_stable()

    # Angular

    @synchronized
    def evaluate(self, expression: str) -> Any:
        """Evaluate an Angular expression in the scope of this element.

        Args:
            expression: Expression such as ``"user.name"`` or ``"items.length"``.

        Returns:
            Whatever the expression evaluates to in the page.

        Raises:
            ExpressionEvaluationError: If the expression throws in the page.
        """
        logger.debug(f"Evaluating expression: {expression}")
        try:
            return self._ng_driver.execute_script(
                EVALUATE.source, self._element, expression
            )
        except JavascriptException as e:
            raise ExpressionEvaluationError(
                f"Could not evaluate expression '{expression}': {e.msg}"
            ) from e

    # State

    @synchronized
    def is_displayed(self) -> bool:
        return self._element.is_displayed()

    @synchronized
    def is_enabled(self) -> bool:
        return self._element.is_enabled()

    @synchronized
    def is_selected(self) -> bool:
        return self._element.is_selected()

    @property
    @synchronized
    def location(self) -> dict:
        """Get the element's top-left corner relative to the page."""
        return self._element.location

    @property
    @synchronized
    def size(self) -> dict:
        """Get the element's width and height."""
        return self._element.size

    @property
    @synchronized
    def tag_name(self) -> str:
        return self._element.tag_name

    @property
    @synchronized
    def text(self) -> str:
        """Get the visible text of the element."""
        return self._element.text

    @synchronized
    def get_attribute(self, name: str) -> Optional[str]:
        return self._element.get_attribute(name)

    @synchronized
    def get_property(self, name: str) -> Any:
        return self._element.get_property(name)

    @synchronized
    def value_of_css_property(self, property_name: str) -> str:
        return self._element.value_of_css_property(property_name)

    # Actions

    @synchronized
    def clear(self) -> None:
        self._element.clear()

    @synchronized
    def click(self) -> None:
        self._element.click()

    @synchronized
    def send_keys(self, *value: Any) -> None:
        """Type into the element."""
        self._element.send_keys(*value)

    @synchronized
    def submit(self) -> None:
        self._element.submit()

    # Queries

    def find_elements(self, by: Any, value: Optional[str] = None) -> list["NgElement"]:
        """Find all descendants matching a locator.

        Script-backed locators receive the root selector and this element as
        trailing arguments so the search is scoped to this element.

        Args:
            by: A ScriptBy, a ``(by, value)`` tuple or a Selenium ``By`` strategy.
            value: Selector value when ``by`` is a strategy.

        Returns:
            Matching elements wrapped as NgElement, possibly empty.
        """
        by, value = normalize_locator(by, value)
        self._sync()
        if supports_context_injection(by):
            found = by.find_elements(
                self._element,
                extra_args=(self._ng_driver.root_element, self._element),
            )
        else:
            found = self._element.find_elements(by, value)
        return [NgElement(self._ng_driver, element) for element in found]

    def find_element(self, by: Any, value: Optional[str] = None) -> "NgElement":
        """Find the first descendant matching a locator.

        Raises:
            NoSuchElementError: If nothing matches.
        """
        by, value = normalize_locator(by, value)
        elements = self.find_elements(by, value)
        if not elements:
            raise NoSuchElementError(
                f"Unable to locate element: {{ {describe_locator(by, value)} }}."
            )
        return elements[0]

    # Pass-through

    def __getattr__(self, name: str) -> Any:
        # Members not wrapped above are forwarded unsynchronized.
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._element, name)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, NgElement):
            return self._element == other._element
        if isinstance(other, WebElement):
            return self._element == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._element)

    def __repr__(self) -> str:
        return f"<NgElement wrapping {self._element!r}>"


def unwrap_elements(value: Any) -> Any:
    """Replace NgElements with their WebElements, recursing into containers.

    Selenium only serializes real WebElements as script arguments.
    """
    if isinstance(value, NgElement):
        return value.wrapped_element
    if isinstance(value, list):
        return [unwrap_elements(item) for item in value]
    if isinstance(value, tuple):
        return tuple(unwrap_elements(item) for item in value)
    if isinstance(value, dict):
        return {key: unwrap_elements(item) for key, item in value.items()}
    return value


__all__ = [
    "NgElement",
    "describe_locator",
    "normalize_locator",
    "unwrap_elements",
]
