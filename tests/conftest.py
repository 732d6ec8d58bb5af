import pytest

from crossname.common import bus

pytest_plugins = ["crossname.test_utils.fixtures"]


@pytest.fixture(autouse=True)
def _isolated_bus(monkeypatch):
    # The CLI installs a global renderer; never let it leak between tests.
    monkeypatch.setattr(bus, "_renderer", None)
