"""
Browser compatibility table for ngdriver.

Some drivers need special handling during navigation or synchronization.
Those needs are recorded here, keyed by the ``browserName`` capability, and
read at the few places that care: construction, the pre-wait settle and the
navigation target assignment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.support.ui import WebDriverWait

from ngdriver.scripts import DOCUMENT_READY_STATE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BrowserQuirks:
    """Per-browser adjustments to the navigation and wait protocol."""

    direct_url_assignment: bool = False
    """Navigate with the driver's own ``get`` instead of a script assignment."""

    settle_on_start: float = 0.0
    """Upper bound (seconds) for the readiness wait after construction."""

    settle_before_wait: float = 0.0
    """Upper bound (seconds) for the readiness wait before each stability wait."""


DEFAULT_QUIRKS = BrowserQuirks()

_DIRECT_URL = BrowserQuirks(direct_url_assignment=True)

BROWSER_QUIRKS: dict[str, BrowserQuirks] = {
    "internet explorer": _DIRECT_URL,
    "microsoftedge": _DIRECT_URL,
    "phantomjs": _DIRECT_URL,
    "firefox": _DIRECT_URL,
    "safari": BrowserQuirks(
        direct_url_assignment=True,
        settle_on_start=5.0,
        settle_before_wait=0.5,
    ),
}

# Names matched by substring rather than equality ("safari technology preview").
_SUBSTRING_KEYS = ("safari",)


def browser_name(driver: Any) -> str:
    """Get the lowercased ``browserName`` capability, or an empty string."""
    capabilities = getattr(driver, "capabilities", None)
    if not isinstance(capabilities, dict):
        return ""
    name = capabilities.get("browserName")
    return name.lower() if isinstance(name, str) else ""


def quirks_for(driver: Any) -> BrowserQuirks:
    """Get the quirks that apply to a driver instance."""
    name = browser_name(driver)
    if not name:
        return DEFAULT_QUIRKS
    if name in BROWSER_QUIRKS:
        return BROWSER_QUIRKS[name]
    for key in _SUBSTRING_KEYS:
        if key in name:
            return BROWSER_QUIRKS[key]
    return DEFAULT_QUIRKS


def settle(driver: Any, timeout: float, poll_frequency: float = 0.1) -> bool:
    """Wait until the document reports ``readyState == "complete"``.

    Returns True if the page became ready within ``timeout`` seconds. Running
    out of time is not an error; the stability wait that follows decides
    whether the page is usable.
    """
    if timeout <= 0:
        return True

    def _ready(d: Any) -> bool:
        return d.execute_script(DOCUMENT_READY_STATE.source) == "complete"

    try:
        WebDriverWait(
            driver,
            timeout,
            poll_frequency=poll_frequency,
            ignored_exceptions=(WebDriverException,),
        ).until(_ready)
        return True
    except TimeoutException:
        logger.debug(f"Document not ready after {timeout:.2f}s settle period")
        return False


__all__ = [
    "BROWSER_QUIRKS",
    "BrowserQuirks",
    "DEFAULT_QUIRKS",
    "browser_name",
    "quirks_for",
    "settle",
]
