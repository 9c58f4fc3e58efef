# Headless Qt for the window binding tests. Must be set before any
# QApplication is created; harmless when PyQt6 is not installed.

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

try:
    from PyQt6.QtWidgets import QApplication
except Exception:  # pragma: no cover
    QApplication = None  # type: ignore


@pytest.fixture(scope="session")
def qapp():
    if QApplication is None:
        pytest.skip("PyQt6 not available")
    return QApplication.instance() or QApplication(sys.argv[:1])
