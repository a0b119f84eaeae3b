"""Shared fixtures."""

import pytest

from fakes import FakeHistory, FakeViewer


@pytest.fixture
def history():
    return FakeHistory()


@pytest.fixture
def viewer():
    return FakeViewer()


@pytest.fixture
def make_viewer():
    return FakeViewer
