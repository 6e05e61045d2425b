"""
Synchronized navigation for ngdriver.

NgNavigation mirrors the browser history API (go to URL, back, forward,
refresh). URL loads go through NgDriver's bootstrap protocol so mock modules
are injected consistently, and history moves wait for Angular first.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ngdriver.scripts import GET_HREF
from ngdriver.sync import synchronized

if TYPE_CHECKING:
    from ngdriver.driver import NgDriver

logger = logging.getLogger(__name__)


class NgNavigation:
    """Angular-aware navigation helper.

    Obtained from ``NgDriver.navigate()``. The wrapped navigation object is
    anything exposing ``get``, ``back``, ``forward`` and ``refresh``; with
    Selenium that is the WebDriver itself.

    Example:
        nav = driver.navigate()
        nav.go_to_url("http://localhost:8000/#/home")
        nav.go_to_location("/settings")
        nav.back()
    """

    def __init__(self, ng_driver: "NgDriver", navigation: Any) -> None:
        self._ng_driver = ng_driver
        self._navigation = navigation

    @property
    def wrapped_navigation(self) -> Any:
        """Get the wrapped navigation object."""
        return self._navigation

    def _sync(self) -> None:
        self._ng_driver.wait_for_stable()

    def go_to_url(self, url: Any, ensure_app: bool = True) -> None:
        """Load a new page in the current window.

        Args:
            url: Absolute URL, as a string or any object whose ``str()`` is one.
            ensure_app: Run the Angular bootstrap protocol and fail if the
                page is not an Angular application. When False the page is
                loaded directly by the wrapped navigation object.

        Raises:
            ValueError: If url is None.
        """
        if url is None:
            raise ValueError("URL cannot be None")
        url = str(url)
        if ensure_app:
            self._ng_driver.set_url(url)
        else:
            self._navigation.get(url)

    def go_to_location(self, path: str) -> None:
        """Navigate inside the app, as ``$location.url(path)`` would."""
        self._ng_driver.set_location(path)

    @synchronized
    def back(self) -> None:
        """Move back one entry in the browser history."""
        self._navigation.back()

    @synchronized
    def forward(self) -> None:
        """Move forward one entry in the browser history."""
        self._navigation.forward()

    def refresh(self) -> None:
        """Reload the current page.

        With synchronization enabled the current URL is loaded again through
        the bootstrap protocol instead of a native reload, so deferred
        bootstrap and mock modules apply to the reloaded page too.
        """
        if self._ng_driver.ignore_synchronization:
            self._navigation.refresh()
            return

        url = self._ng_driver.execute_script(GET_HREF.source)
        logger.debug(f"Refreshing through bootstrap protocol: {url}")
        self._ng_driver.set_url(url)

    def __repr__(self) -> str:
        return f"<NgNavigation wrapping {self._navigation!r}>"


__all__ = ["NgNavigation"]
