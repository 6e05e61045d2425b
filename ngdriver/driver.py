"""
Angular-aware WebDriver wrapper.

NgDriver wraps a Selenium WebDriver and, before every command that reads or
changes page state, blocks until Angular reports no pending work (digest
cycles, ``$timeout`` tasks, ``$http`` requests). It also owns page loads:
bootstrap is deferred so mock modules can be injected before the
application initializes, then resumed.

Example:
    from selenium import webdriver
    from ngdriver import NgBy, NgDriver

    with NgDriver(webdriver.Chrome(), root_element="#app") as driver:
        driver.url = "http://localhost:8000/"
        driver.find_element(NgBy.model("query")).send_keys("ng")
        rows = driver.find_elements(NgBy.repeater("phone in phones"))
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Union

from selenium.common.exceptions import TimeoutException

from ngdriver.compat import BrowserQuirks, quirks_for, settle
from ngdriver.config import NgDriverOptions
from ngdriver.element import (
    NgElement,
    describe_locator,
    normalize_locator,
    unwrap_elements,
)
from ngdriver.exceptions import (
    AngularNotFoundError,
    NoSuchElementError,
    SynchronizationTimeoutError,
    UnsupportedDriverError,
    UnsupportedOperationError,
)
from ngdriver.locators import supports_context_injection
from ngdriver.modules import BASE_MODULE_NAME, BaseModule, NgModule
from ngdriver.navigation import NgNavigation
from ngdriver.scripts import (
    DEFER_BOOTSTRAP,
    DEFER_BOOTSTRAP_AND_NAVIGATE,
    GET_LOCATION,
    RESUME_ANGULAR_BOOTSTRAP,
    SET_LOCATION,
    TEST_FOR_ANGULAR,
    WAIT_FOR_ANGULAR,
)
from ngdriver.sync import synchronized

logger = logging.getLogger(__name__)


class NgDriver:
    """Synchronizing wrapper around a WebDriver.

    The wrapper does not own the wrapped driver's lifecycle beyond the
    explicit ``quit``/``close``/``dispose`` calls and the context manager.

    Args:
        driver: A WebDriver able to execute scripts.
        root_element: CSS selector of the element hosting the Angular app.
            Defaults to ``options.root_element`` ("body").
        mock_modules: Modules injected before bootstrap on every page load.
        options: Synchronization and navigation options.

    Raises:
        UnsupportedDriverError: If the driver cannot execute scripts.
    """

    def __init__(
        self,
        driver: Any,
        root_element: Optional[str] = None,
        mock_modules: Optional[Iterable[NgModule]] = None,
        *,
        options: Optional[NgDriverOptions] = None,
    ) -> None:
        if not callable(getattr(driver, "execute_script", None)):
            raise UnsupportedDriverError(
                "The WebDriver instance must support script execution (execute_script)."
            )

        self._driver = driver
        self._options = options or NgDriverOptions()
        self._root_element = root_element or self._options.root_element
        self._mock_modules: list[NgModule] = list(mock_modules or ())
        self._ignore_synchronization = self._options.ignore_synchronization
        self._quirks = quirks_for(driver)

        if self._options.script_timeout is not None:
            driver.set_script_timeout(self._options.script_timeout)

        if self._quirks.settle_on_start:
            settle(driver, self._quirks.settle_on_start)

        logger.debug(
            f"NgDriver created (root_element={self._root_element!r}, "
            f"mock_modules={[m.name for m in self._mock_modules]})"
        )

    # Configuration

    @property
    def wrapped_driver(self) -> Any:
        """Get the wrapped WebDriver.

        Use it directly for pages that are not Angular applications, such as
        a login screen.
        """
        return self._driver

    @property
    def root_element(self) -> str:
        """Get the CSS selector of the element hosting the Angular app."""
        return self._root_element

    @property
    def options(self) -> NgDriverOptions:
        return self._options

    @property
    def quirks(self) -> BrowserQuirks:
        """Get the browser quirks in effect for the wrapped driver."""
        return self._quirks

    @property
    def ignore_synchronization(self) -> bool:
        """Whether waiting for Angular is disabled.

        Disabling synchronization makes tests prone to races with ``$timeout``
        and ``$http``. Use it only when needed, such as when a page polls an
        API continuously with ``$timeout``.
        """
        return self._ignore_synchronization

    @ignore_synchronization.setter
    def ignore_synchronization(self, value: bool) -> None:
        self._ignore_synchronization = bool(value)

    @property
    def mock_modules(self) -> tuple[NgModule, ...]:
        """Get the registered mock modules, in injection order."""
        return tuple(self._mock_modules)

    def add_mock_module(
        self,
        module: Union[NgModule, str],
        script: Optional[str] = None,
    ) -> NgModule:
        """Register a module to inject before Angular bootstraps.

        Accepts either an NgModule or a ``(name, script)`` pair:

            driver.add_mock_module("httpMock", "angular.module('httpMock', [])...")

        Returns:
            The registered module.
        """
        if not isinstance(module, NgModule):
            if script is None:
                raise ValueError("A script is required when registering a module by name")
            module = NgModule(module, script)
        self._mock_modules.append(module)
        return module

    # Synchronization

    def wait_for_stable(self) -> None:
        """Wait for Angular to finish pending ``$http``, ``$timeout`` and digests.

        Does nothing when ``ignore_synchronization`` is set. The wait is
        bounded by the wrapped driver's script timeout.

        Raises:
            SynchronizationTimeoutError: If Angular does not settle in time.
            AngularNotFoundError: If no Angular application can be found.
        """
        if self._ignore_synchronization:
            return

        if self._quirks.settle_before_wait:
            settle(self._driver, self._quirks.settle_before_wait)

        try:
            error = self._driver.execute_async_script(
                WAIT_FOR_ANGULAR.source, self._root_element
            )
        except TimeoutException as e:
            raise SynchronizationTimeoutError(
                f"Timed out waiting for Angular to become stable "
                f"(root element '{self._root_element}')"
            ) from e

        if error:
            raise AngularNotFoundError(
                f"Error while waiting for Angular to become stable "
                f"(root element '{self._root_element}'): {error}"
            )

    def _sync(self) -> None:
        self.wait_for_stable()

    # Navigation

    @property
    @synchronized
    def url(self) -> str:
        """Get or set the URL the browser is displaying.

        Setting the URL runs the bootstrap protocol (see ``set_url``).
        """
        return self._driver.current_url

    @url.setter
    def url(self, value: str) -> None:
        self.set_url(value)

    current_url = url

    def get(self, url: str) -> None:
        """Load a page through the bootstrap protocol."""
        self.set_url(url)

    def set_url(self, url: str, ensure_app: bool = True) -> None:
        """Load a page, deferring Angular bootstrap to inject mock modules.

        Args:
            url: Absolute URL to load.
            ensure_app: Require an Angular application on the page. When
                False the URL is loaded directly with no synchronization.

        Raises:
            AngularNotFoundError: If Angular cannot be found on the page.
            UnsupportedOperationError: If mock modules are registered and
                the page runs Angular 2 or newer.
        """
        if not ensure_app:
            self._driver.get(url)
            return

        logger.debug(f"Navigating to {url} with deferred bootstrap")
        self._driver.get(self._options.blank_url)

        if self._quirks.direct_url_assignment:
            self._driver.execute_script(DEFER_BOOTSTRAP.source)
            self._driver.get(url)
        else:
            self._driver.execute_script(DEFER_BOOTSTRAP_AND_NAVIGATE.source, url)

        if self._ignore_synchronization:
            return

        version = self._detect_angular(url)
        logger.debug(f"Detected Angular version {version} on {url}")

        if version == 1:
            self._resume_bootstrap()
        elif self._mock_modules:
            logger.warning(
                f"Refusing to inject {len(self._mock_modules)} mock module(s) "
                f"into Angular {version} page {url}"
            )
            raise UnsupportedOperationError(
                f"Mock modules are not supported in Angular {version} (page '{url}')"
            )

    def _detect_angular(self, url: str) -> int:
        try:
            result = self._driver.execute_async_script(
                TEST_FOR_ANGULAR.source,
                self._options.detection_attempts,
                self._options.detection_interval_ms,
                self._options.ng12_hybrid,
            )
        except TimeoutException as e:
            raise AngularNotFoundError(
                f"Angular could not be found on the page '{url}'"
            ) from e

        version = result.get("ver") if isinstance(result, dict) else None
        if not isinstance(version, int):
            message = result.get("message") if isinstance(result, dict) else None
            raise AngularNotFoundError(
                f"Angular could not be found on the page '{url}'"
                + (f": {message}" if message else "")
            )
        return version

    def _resume_bootstrap(self) -> None:
        # Angular is paused until resumeBootstrap() runs.
        if not any(m.name == BASE_MODULE_NAME for m in self._mock_modules):
            self._mock_modules.append(
                BaseModule(self._options.track_outstanding_timeouts)
            )

        for module in self._mock_modules:
            logger.debug(f"Injecting module {module.name}")
            self._driver.execute_script(module.script)

        names = ",".join(module.name for module in self._mock_modules)
        logger.debug(f"Resuming Angular bootstrap with modules: {names}")
        self._driver.execute_script(RESUME_ANGULAR_BOOTSTRAP.source, names)

    @property
    @synchronized
    def location(self) -> Optional[str]:
        """Get or set the in-app location, as ``$location.url()`` does."""
        return self._driver.execute_script(GET_LOCATION.source, self._root_element)

    @location.setter
    def location(self, path: str) -> None:
        self.set_location(path)

    @synchronized
    def set_location(self, path: str) -> None:
        """Navigate inside the app without a page load."""
        logger.debug(f"Setting in-app location to {path}")
        self._driver.execute_script(SET_LOCATION.source, self._root_element, path)

    def navigate(self) -> NgNavigation:
        """Get a navigation helper bound to this driver."""
        return NgNavigation(self, self._driver)

    # Page

    @property
    @synchronized
    def page_source(self) -> str:
        return self._driver.page_source

    @property
    @synchronized
    def title(self) -> str:
        return self._driver.title

    @property
    def current_window_handle(self) -> str:
        return self._driver.current_window_handle

    @property
    def window_handles(self) -> list[str]:
        return self._driver.window_handles

    # Queries

    def find_elements(self, by: Any, value: Optional[str] = None) -> list[NgElement]:
        """Find all elements matching a locator.

        Script-backed locators receive the root selector as a trailing
        argument.

        Args:
            by: A ScriptBy, a ``(by, value)`` tuple or a Selenium ``By`` strategy.
            value: Selector value when ``by`` is a strategy.

        Returns:
            Matching elements wrapped as NgElement, possibly empty.
        """
        by, value = normalize_locator(by, value)
        self._sync()
        if supports_context_injection(by):
            found = by.find_elements(self._driver, extra_args=(self._root_element,))
        else:
            found = self._driver.find_elements(by, value)
        return [NgElement(self, element) for element in found]

    def find_element(self, by: Any, value: Optional[str] = None) -> NgElement:
        """Find the first element matching a locator.

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

    # Scripts

    def execute_script(self, script: str, *args: Any) -> Any:
        """Execute a script in the current window, without synchronizing.

        NgElement arguments, also inside lists, tuples and dicts, are passed
        to the page as their wrapped WebElements.
        """
        return self._driver.execute_script(script, *unwrap_elements(args))

    def execute_async_script(self, script: str, *args: Any) -> Any:
        """Execute an asynchronous script in the current window, without synchronizing."""
        return self._driver.execute_async_script(script, *unwrap_elements(args))

    # Lifecycle

    def close(self) -> None:
        """Close the current window."""
        self._driver.close()

    def quit(self) -> None:
        """Quit the wrapped driver, closing every window."""
        self._driver.quit()

    def dispose(self) -> None:
        self.quit()

    def __enter__(self) -> "NgDriver":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.quit()

    def __getattr__(self, name: str) -> Any:
        # Everything not wrapped above goes to the driver unsynchronized.
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._driver, name)

    def __repr__(self) -> str:
        return f"<NgDriver root_element={self._root_element!r} wrapping {self._driver!r}>"


__all__ = ["NgDriver"]
