"""Tests for the browser compatibility table."""

from unittest.mock import MagicMock

import pytest
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.remote.webdriver import WebDriver

from ngdriver.compat import (
    BROWSER_QUIRKS,
    DEFAULT_QUIRKS,
    BrowserQuirks,
    browser_name,
    quirks_for,
    settle,
)
from ngdriver.scripts import DOCUMENT_READY_STATE


def make_driver(capabilities):
    driver = MagicMock(spec=WebDriver)
    driver.capabilities = capabilities
    return driver


class TestBrowserName:
    """Tests for browser_name()."""

    def test_lowercased(self):
        assert browser_name(make_driver({"browserName": "MicrosoftEdge"})) == "microsoftedge"

    def test_missing_capabilities(self):
        assert browser_name(object()) == ""

    def test_non_dict_capabilities(self):
        """Test mocks and odd drivers without real capabilities."""
        assert browser_name(MagicMock()) == ""

    def test_missing_browser_name(self):
        assert browser_name(make_driver({})) == ""


class TestQuirksFor:
    """Tests for quirks_for()."""

    def test_chrome_has_no_quirks(self):
        assert quirks_for(make_driver({"browserName": "chrome"})) is DEFAULT_QUIRKS

    @pytest.mark.parametrize(
        "name", ["firefox", "internet explorer", "MicrosoftEdge", "phantomjs"]
    )
    def test_direct_url_browsers(self, name):
        """Test browsers that navigate with get() instead of a script."""
        quirks = quirks_for(make_driver({"browserName": name}))
        assert quirks.direct_url_assignment is True
        assert quirks.settle_on_start == 0.0

    def test_safari(self):
        quirks = quirks_for(make_driver({"browserName": "safari"}))
        assert quirks == BrowserQuirks(
            direct_url_assignment=True, settle_on_start=5.0, settle_before_wait=0.5
        )

    def test_safari_variant_matched_by_substring(self):
        """Test names containing safari share its quirks."""
        quirks = quirks_for(make_driver({"browserName": "Safari Technology Preview"}))
        assert quirks is BROWSER_QUIRKS["safari"]

    def test_unknown_driver(self):
        assert quirks_for(object()) is DEFAULT_QUIRKS


class TestSettle:
    """Tests for the readiness wait."""

    def test_zero_timeout_does_nothing(self):
        driver = make_driver({})
        assert settle(driver, 0) is True
        driver.execute_script.assert_not_called()

    def test_ready_document(self):
        driver = make_driver({})
        driver.execute_script.return_value = "complete"

        assert settle(driver, 1.0) is True
        driver.execute_script.assert_called_with(DOCUMENT_READY_STATE.source)

    def test_not_ready_times_out_quietly(self):
        """Test running out of time returns False instead of raising."""
        driver = make_driver({})
        driver.execute_script.return_value = "loading"

        assert settle(driver, 0.05, poll_frequency=0.01) is False

    def test_driver_errors_ignored_while_polling(self):
        """Test transient driver errors are retried until ready."""
        driver = make_driver({})
        driver.execute_script.side_effect = [WebDriverException("busy"), "complete"]

        assert settle(driver, 1.0, poll_frequency=0.01) is True
