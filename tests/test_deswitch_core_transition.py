import types

import pytest

import deswitch.config as config
import deswitch.core.profile as profile
from deswitch.core import transition
from deswitch.core.profile import Profile
from deswitch.core.transition import DisplayManagerTransition

GNOME = Profile("gnome", "GNOME", {"gnome-shell", "gdm"}, "gdm")
KDE = Profile("kde", "KDE", {"plasma-desktop", "sddm"}, "sddm")
LXQT = Profile("lxqt", "LXQt", {"lxqt", "sddm"}, "sddm")
SWAY = Profile("sway", "Sway", {"sway"}, None)
RIVER = Profile("river", "River", {"river"}, None)

ALL = [GNOME, KDE, LXQT, SWAY, RIVER] + list(profile.default_catalog())


@pytest.fixture(autouse=True)
def reset_config():
    orig = types.SimpleNamespace(sudo_command=config.sudo_command)
    yield
    config.sudo_command = orig.sudo_command


def test_gnome_to_kde_switches_gdm_to_sddm():
    plan = transition.plan(GNOME, KDE)

    assert plan == DisplayManagerTransition(disable="gdm", enable="sddm")
    assert not plan.is_empty()


@pytest.mark.parametrize("p", ALL, ids=lambda p: p.id)
def test_plan_with_itself_is_empty(p: Profile):
    assert transition.plan(p, p).is_empty()


def test_same_display_manager_is_empty():
    assert transition.plan(KDE, LXQT).is_empty()
    assert transition.plan(KDE, LXQT).lines() == []


def test_both_without_display_manager_is_empty():
    assert transition.plan(SWAY, RIVER).is_empty()


@pytest.mark.parametrize("a", ALL, ids=lambda p: p.id)
@pytest.mark.parametrize("b", ALL, ids=lambda p: p.id)
def test_disable_is_always_paired_with_enable(a: Profile, b: Profile):
    plan = transition.plan(a, b)

    if a.display_manager is not None and b.display_manager is not None and not plan.is_empty():
        assert plan.disable == a.display_manager
        assert plan.enable == b.display_manager

    if plan.disable is not None and b.display_manager is not None:
        assert plan.enable is not None

    # Only a target without a display manager may leave the system without one
    if plan.leaves_no_display_manager():
        assert b.display_manager is None


def test_disable_line_is_never_rendered_without_enable_line():
    lines = transition.plan(GNOME, KDE).lines()

    assert lines == [
        "sudo systemctl disable gdm 2>/dev/null || true",
        "sudo systemctl enable --force sddm",
    ]


def test_switch_to_profile_without_display_manager():
    plan = transition.plan(GNOME, SWAY)

    assert plan == DisplayManagerTransition(disable="gdm", enable=None)
    assert plan.leaves_no_display_manager()
    assert plan.lines() == ["sudo systemctl disable gdm 2>/dev/null || true"]


def test_switch_from_profile_without_display_manager():
    plan = transition.plan(SWAY, KDE)

    assert plan == DisplayManagerTransition(disable=None, enable="sddm")
    assert not plan.leaves_no_display_manager()
    assert plan.lines() == ["sudo systemctl enable --force sddm"]


def test_lines_without_sudo():
    config.sudo_command = ""

    assert transition.plan(GNOME, KDE).lines() == [
        "systemctl disable gdm 2>/dev/null || true",
        "systemctl enable --force sddm",
    ]


def test_lines_with_custom_commands():
    class UserCommands(transition.DisplayManagerCommands):
        def enable_unit(self, unit: str) -> list[str]:
            return ["systemctl", "enable", f"{unit}.service"]

    lines = transition.plan(GNOME, KDE).lines(UserCommands())

    assert lines[1] == "sudo systemctl enable sddm.service"
