from __future__ import annotations

import sys
import types

import main


def test_uvloop_is_skipped_on_windows(monkeypatch):
    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.setitem(sys.modules, "uvloop", None)  # importing would raise

    assert main.install_event_loop() is False


def test_uvloop_installed_elsewhere(monkeypatch):
    calls = []
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setitem(sys.modules, "uvloop", types.SimpleNamespace(install=lambda: calls.append(True)))

    assert main.install_event_loop() is True
    assert calls == [True]
