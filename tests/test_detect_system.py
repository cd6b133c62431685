from __future__ import annotations

from pathlib import Path

import pytest

from distro_setup.errors import FatalSetupError
from distro_setup.lib.sysdetect import parse_os_release
from distro_setup.steps import DetectSystemStep

MINT_OS_RELEASE = """\
# Linux Mint
NAME="Linux Mint"
VERSION="21.3 (Virginia)"
ID=linuxmint
ID_LIKE="ubuntu debian"
PRETTY_NAME='Linux Mint 21.3'
"""


@pytest.fixture
def os_release(tmp_path: Path) -> Path:
    p = tmp_path / "os-release"
    p.write_text(MINT_OS_RELEASE, encoding="utf-8")
    return p


@pytest.fixture
def not_root(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("distro_setup.lib.sysdetect.os.geteuid", lambda: 1000)


def test_parse_os_release_handles_quotes_and_comments() -> None:
    fields = parse_os_release(MINT_OS_RELEASE)

    assert fields["NAME"] == "Linux Mint"
    assert fields["ID"] == "linuxmint"
    assert fields["ID_LIKE"] == "ubuntu debian"
    assert fields["PRETTY_NAME"] == "Linux Mint 21.3"
    assert "# Linux Mint" not in fields


def test_detect_builds_profile(make_ctx, runner, os_release, not_root) -> None:
    ctx = make_ctx(profile=False, config={"os_release_path": str(os_release)})

    DetectSystemStep().run(ctx)

    assert ctx.profile is not None
    assert ctx.profile.distro_name == "Linux Mint"
    assert ctx.profile.distro_id == "linuxmint"
    assert ctx.profile.id_like == ("ubuntu", "debian")
    assert ctx.profile.has_sudo is True
    assert ctx.profile.is_privileged_user is False
    assert ["sudo", "-n", "true"] in runner.calls
    assert ["sudo", "-v"] not in runner.calls


def test_missing_os_release_is_fatal(make_ctx, tmp_path, not_root) -> None:
    ctx = make_ctx(profile=False, config={"os_release_path": str(tmp_path / "missing")})

    with pytest.raises(FatalSetupError, match="Cannot detect Linux distribution"):
        DetectSystemStep().run(ctx)
    assert ctx.profile is None


def test_running_as_root_is_fatal(make_ctx, runner, os_release, monkeypatch) -> None:
    monkeypatch.setattr("distro_setup.lib.sysdetect.os.geteuid", lambda: 0)
    ctx = make_ctx(profile=False, config={"os_release_path": str(os_release)})

    with pytest.raises(FatalSetupError, match="root"):
        DetectSystemStep().run(ctx)
    assert runner.calls == []


def test_prompts_for_sudo_when_not_cached(make_ctx, runner, os_release, not_root) -> None:
    runner.respond(["sudo", "-n", "true"], returncode=1)
    ctx = make_ctx(profile=False, config={"os_release_path": str(os_release)})

    DetectSystemStep().run(ctx)

    assert runner.calls == [["sudo", "-n", "true"], ["sudo", "-v"]]


def test_unavailable_sudo_is_fatal(make_ctx, runner, os_release, not_root) -> None:
    runner.respond(["sudo", "-n", "true"], returncode=1)
    runner.respond(["sudo", "-v"], returncode=1)
    ctx = make_ctx(profile=False, config={"os_release_path": str(os_release)})

    with pytest.raises(FatalSetupError, match="sudo"):
        DetectSystemStep().run(ctx)
