import pytest  # noqa: F401
import gettext


def pytest_configure(config):
    """
    Install gettext's `_` during pytest collection, as the application
    does at startup, so UI modules can be imported.
    """
    gettext.install('gridtrace')
