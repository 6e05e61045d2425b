"""Tests for the synchronized decorator."""

from ngdriver import NgDriver, NgElement, NgNavigation
from ngdriver.sync import synchronized


def is_synchronized(member):
    """Check whether a method or property getter waits for Angular first."""
    if isinstance(member, property):
        member = member.fget
    return getattr(member, "__synchronized__", False)


class Recorder:
    def __init__(self):
        self.events = []

    def _sync(self):
        self.events.append("sync")

    @synchronized
    def act(self, value, suffix=""):
        """Record an action."""
        self.events.append(f"act:{value}{suffix}")
        return value

    @property
    @synchronized
    def state(self):
        self.events.append("state")
        return "ready"


class TestSynchronized:
    """Tests for synchronized()."""

    def test_syncs_before_call(self):
        recorder = Recorder()
        assert recorder.act(1, suffix="!") == 1
        assert recorder.events == ["sync", "act:1!"]

    def test_property_getter(self):
        recorder = Recorder()
        assert recorder.state == "ready"
        assert recorder.events == ["sync", "state"]

    def test_preserves_metadata(self):
        assert Recorder.act.__name__ == "act"
        assert Recorder.act.__doc__ == "Record an action."


class TestIsSynchronized:
    """Tests for which wrapper members wait for Angular."""

    def test_driver_members(self):
        assert is_synchronized(NgDriver.url)
        assert is_synchronized(NgDriver.location)
        assert is_synchronized(NgDriver.set_location)
        assert is_synchronized(NgDriver.page_source)
        assert is_synchronized(NgDriver.title)
        assert not is_synchronized(NgDriver.execute_script)
        assert not is_synchronized(NgDriver.window_handles)

    def test_element_members(self):
        for name in ("click", "send_keys", "clear", "submit", "evaluate", "text"):
            assert is_synchronized(getattr(NgElement, name)), name

    def test_navigation_members(self):
        assert is_synchronized(NgNavigation.back)
        assert is_synchronized(NgNavigation.forward)
        assert not is_synchronized(NgNavigation.go_to_url)
