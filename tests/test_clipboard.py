import pyperclip
import pytest

from securevault.clipboard import ClipboardManager


class FakeClipboard:
    def __init__(self):
        self.content = "previous content"
        self.fail = False

    def copy(self, text):
        if self.fail:
            raise pyperclip.PyperclipException("no clipboard mechanism")
        self.content = text

    def paste(self):
        if self.fail:
            raise pyperclip.PyperclipException("no clipboard mechanism")
        return self.content


class FakeTimer:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.started = False
        self.joined = False

    def start(self):
        self.started = True

    def join(self):
        self.joined = True

    def fire(self):
        return self.callback()


@pytest.fixture
def clipboard(monkeypatch):
    fake = FakeClipboard()
    monkeypatch.setattr(pyperclip, "copy", fake.copy)
    monkeypatch.setattr(pyperclip, "paste", fake.paste)
    return fake


@pytest.fixture
def timers():
    return []


@pytest.fixture
def manager(timers):
    def factory(delay, callback):
        timer = FakeTimer(delay, callback)
        timers.append(timer)
        return timer
    return ClipboardManager(timer_factory=factory)


def test_copy_schedules_clear(clipboard, manager, timers):
    assert manager.copy_with_auto_clear("s3cret", 30)

    assert clipboard.content == "s3cret"
    assert len(timers) == 1
    assert timers[0].delay == 30
    assert timers[0].started

    assert timers[0].fire()
    assert clipboard.content == ""


def test_clear_is_idempotent(clipboard, manager, timers):
    manager.copy_with_auto_clear("s3cret", 5)
    assert timers[0].fire()
    assert not timers[0].fire()
    assert not manager.clear_if_unchanged("s3cret")
    assert clipboard.content == ""


def test_clear_leaves_newer_content_alone(clipboard, manager, timers):
    manager.copy_with_auto_clear("s3cret", 5)
    clipboard.content = "something the user copied later"

    assert not timers[0].fire()
    assert clipboard.content == "something the user copied later"


def test_zero_delay_never_clears(clipboard, manager, timers):
    assert manager.copy_with_auto_clear("s3cret", 0)
    assert timers == []
    assert clipboard.content == "s3cret"
    manager.wait()


def test_copy_failure(clipboard, manager, timers):
    clipboard.fail = True
    assert not manager.copy_with_auto_clear("s3cret", 30)
    assert timers == []


def test_clear_failure_is_swallowed(clipboard, manager, timers):
    manager.copy_with_auto_clear("s3cret", 5)
    clipboard.fail = True
    assert not timers[0].fire()


def test_wait_joins_pending_timer(clipboard, manager, timers):
    manager.copy_with_auto_clear("s3cret", 5)
    manager.wait()
    assert timers[0].joined


def test_default_timer_is_daemon(clipboard):
    manager = ClipboardManager()
    manager.copy_with_auto_clear("s3cret", 0.01)
    manager.wait()
    assert clipboard.content == ""
