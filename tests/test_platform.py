"""Tests for the host platform gate."""

from __future__ import annotations

import pytest

from distpack import platform as platform_module
from distpack.platform import PlatformGate, normalize_os_name


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("Windows", "windows"), ("win32", "windows"), ("Darwin", "osx"), ("Linux", "linux")],
)
def test_normalize_os_name(raw: str, expected: str) -> None:
    assert normalize_os_name(raw) == expected


def test_no_required_platform_is_always_supported() -> None:
    assert PlatformGate(host_os="linux").is_supported_platform(None)


def test_required_platform_must_match_host() -> None:
    gate = PlatformGate(host_os="linux")

    assert not gate.is_supported_platform("windows")
    assert gate.is_supported_platform("linux")
    assert PlatformGate(host_os="Windows").is_supported_platform("windows")


def test_host_defaults_to_current_system(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(platform_module.platform, "system", lambda: "Darwin")

    assert PlatformGate().host_os == "osx"
    assert platform_module.is_windows() is False


def test_dry_run_flag() -> None:
    assert PlatformGate(dry_run=True).is_dry_run()
    assert not PlatformGate().is_dry_run()
