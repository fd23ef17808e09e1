import os

import pytest


class FakeBridge:
    """Answers ScriptCommands from a dict. Exception values are raised."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def execute(self, command):
        self.calls.append(command)
        value = self.responses.get(command)
        if isinstance(value, Exception):
            raise value
        return value


class FakeArtwork:
    def __init__(self, data=None):
        self.data = data
        self.urls = []

    def fetch(self, url):
        self.urls.append(url)
        return self.data if url else None


@pytest.fixture
def make_bridge():
    return FakeBridge


@pytest.fixture
def fake_artwork():
    return FakeArtwork()


@pytest.fixture(scope="session")
def qapp():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PySide6.QtWidgets import QApplication

    return QApplication.instance() or QApplication([])
