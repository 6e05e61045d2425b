"""Tests for the client-side script catalog."""

import pytest

from ngdriver.scripts import (
    CATALOG,
    CATALOG_VERSION,
    DEFER_BOOTSTRAP,
    DEFER_BOOTSTRAP_AND_NAVIGATE,
    DEFER_BOOTSTRAP_MARKER,
    FIND_ALL_REPEATER_ROWS,
    FIND_MODEL,
    GET_HREF,
    TEST_FOR_ANGULAR,
    WAIT_FOR_ANGULAR,
    ScriptEntry,
    get_script,
)


class TestCatalog:
    """Tests for the CATALOG mapping."""

    def test_keyed_by_entry_name(self):
        for name, entry in CATALOG.items():
            assert entry.name == name
            assert entry.source.strip()

    def test_read_only(self):
        """Test entries cannot be added or replaced."""
        with pytest.raises(TypeError):
            CATALOG["wait_for_angular"] = ScriptEntry("x", "y")

    def test_entries_frozen(self):
        with pytest.raises(AttributeError):
            WAIT_FOR_ANGULAR.source = "return 1;"

    def test_version(self):
        assert CATALOG_VERSION == "1.0.0"

    def test_contains_all_scripts(self):
        assert set(CATALOG) == {
            "wait_for_angular",
            "test_for_angular",
            "resume_angular_bootstrap",
            "get_location",
            "set_location",
            "evaluate",
            "defer_bootstrap",
            "defer_bootstrap_and_navigate",
            "get_href",
            "document_ready_state",
            "find_bindings",
            "find_model",
            "find_selected_options",
            "find_all_repeater_rows",
        }


class TestGetScript:
    """Tests for get_script()."""

    def test_known_name(self):
        assert get_script("find_model") is FIND_MODEL

    def test_unknown_name(self):
        """Test unknown names list what is available."""
        with pytest.raises(KeyError, match="wait_for_angular"):
            get_script("no_such_script")


class TestScriptContents:
    """Tests for argument conventions of individual scripts."""

    def test_async_scripts_end_with_callback(self):
        assert WAIT_FOR_ANGULAR.args[-1] == "callback"
        assert TEST_FOR_ANGULAR.args[-1] == "callback"

    def test_defer_bootstrap_marker(self):
        assert DEFER_BOOTSTRAP_MARKER in DEFER_BOOTSTRAP.source
        assert DEFER_BOOTSTRAP_MARKER in DEFER_BOOTSTRAP_AND_NAVIGATE.source

    def test_navigation_url_is_an_argument(self):
        """Test the target URL is read from arguments, not embedded."""
        assert "arguments[0]" in DEFER_BOOTSTRAP_AND_NAVIGATE.source
        assert DEFER_BOOTSTRAP_AND_NAVIGATE.args == ("url",)

    def test_locator_context_arguments(self):
        """Test locator scripts take root selector and scope element last."""
        assert FIND_MODEL.args[-2:] == ("root_selector", "using")
        assert FIND_ALL_REPEATER_ROWS.args[-2:] == ("root_selector", "using")

    def test_repeater_uses_exact_match_argument(self):
        assert "var exactMatch = arguments[1];" in FIND_ALL_REPEATER_ROWS.source

    def test_str_is_source(self):
        assert str(GET_HREF) == "return window.location.href;"
