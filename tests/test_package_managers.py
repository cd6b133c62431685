from __future__ import annotations

import pytest

from distro_setup.errors import StepFailed
from distro_setup.lib.apt_repo import MICROSOFT_KEYRING, VSCODE_LIST
from distro_setup.lib.pkg import PackageManager, load_package_managers, resolve_package_manager
from distro_setup.steps import InstallPackagesStep

SUPPORTED = {
    "ubuntu": "debian",
    "debian": "debian",
    "linuxmint": "debian",
    "pop": "debian",
    "arch": "arch",
    "manjaro": "arch",
    "fedora": "fedora",
}


@pytest.mark.parametrize("distro_id,family", sorted(SUPPORTED.items()))
def test_every_supported_id_maps_to_exactly_one_family(distro_id: str, family: str) -> None:
    managers = load_package_managers()
    matches = [pm.family for pm in managers if distro_id in pm.distro_ids]

    assert matches == [family]
    assert resolve_package_manager(distro_id).family == family


def test_id_like_is_used_when_id_is_unknown() -> None:
    pm = resolve_package_manager("elementary", ("ubuntu", "debian"))

    assert pm is not None
    assert pm.family == "debian"


def test_unknown_distro_resolves_to_none() -> None:
    assert resolve_package_manager("gentoo") is None


def test_manifest_rows_require_install_command() -> None:
    with pytest.raises(RuntimeError, match="install is required"):
        PackageManager.from_manifest("broken", {"distro_ids": ["x"], "packages": ["a"]})


def test_arch_runs_a_single_pacman_transaction(make_ctx, runner) -> None:
    ctx = make_ctx(distro_id="arch")

    InstallPackagesStep().run(ctx)

    assert len(runner.calls) == 1
    argv = runner.calls[0]
    assert argv[:4] == ["sudo", "pacman", "-Syu", "--noconfirm"]
    assert "code" in argv
    assert runner.commands("apt") == []
    assert runner.commands("dnf") == []


def test_fedora_runs_dnf_only(make_ctx, runner) -> None:
    ctx = make_ctx(distro_id="fedora")

    InstallPackagesStep().run(ctx)

    assert len(runner.calls) == 1
    assert runner.calls[0][:4] == ["sudo", "dnf", "install", "-y"]
    assert "@development-tools" in runner.calls[0]


def test_debian_family_skips_vscode_when_present(make_ctx, runner) -> None:
    runner.tools.add("code")
    ctx = make_ctx(distro_id="pop")

    InstallPackagesStep().run(ctx)

    assert runner.calls[0] == ["sudo", "apt", "update", "-qq"]
    assert runner.calls[1][:4] == ["sudo", "apt", "install", "-y"]
    assert "build-essential" in runner.calls[1]
    assert len(runner.calls) == 2
    assert runner.commands("pacman") == []
    assert runner.commands("dnf") == []


def test_debian_family_adds_vscode_repo_before_installing_code(make_ctx, runner) -> None:
    ctx = make_ctx(distro_id="ubuntu")

    InstallPackagesStep().run(ctx)

    programs = [argv[1] if argv[0] == "sudo" else argv[0] for argv in runner.calls]
    assert programs == ["apt", "apt", "wget", "gpg", "install", "tee", "apt", "apt"]

    install_key = runner.commands("install")[0]
    assert install_key[-1] == MICROSOFT_KEYRING
    assert install_key[install_key.index("-m") + 1] == "644"
    assert runner.commands("tee")[0] == ["sudo", "tee", VSCODE_LIST]
    assert runner.calls[-1] == ["sudo", "apt", "install", "-y", "code"]


def test_unsupported_distro_is_recoverable(make_ctx, runner) -> None:
    ctx = make_ctx(distro_id="gentoo")

    with pytest.raises(StepFailed, match="Unsupported distribution"):
        InstallPackagesStep().run(ctx)
    assert runner.calls == []
