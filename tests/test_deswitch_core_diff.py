import itertools

import pytest

import deswitch.core.profile as profile
from deswitch.core.diff import DiffResult, diff
from deswitch.core.profile import Profile

GNOME = Profile("gnome", "GNOME", {"gnome-shell", "gdm"}, "gdm")
KDE = Profile("kde", "KDE", {"plasma-desktop", "sddm"}, "sddm")
XFCE = Profile("xfce", "Xfce", {"xfce4", "lightdm", "lightdm-gtk-greeter"}, "lightdm")
I3 = Profile("i3", "i3", {"i3-wm", "lightdm", "lightdm-gtk-greeter"}, "lightdm")
EMPTY = Profile("empty", "Empty")

ALL = [GNOME, KDE, XFCE, I3, EMPTY] + list(profile.default_catalog())


def test_gnome_to_kde():
    result = diff(GNOME, KDE)

    assert result.to_remove == {"gnome-shell", "gdm"}
    assert result.to_install == {"plasma-desktop", "sddm"}


def test_shared_packages_are_kept():
    result = diff(XFCE, I3)

    assert result.to_remove == {"xfce4"}
    assert result.to_install == {"i3-wm"}


@pytest.mark.parametrize("p", ALL, ids=lambda p: p.id)
def test_diff_with_itself_is_empty(p: Profile):
    result = diff(p, p)

    assert result.to_remove == set()
    assert result.to_install == set()
    assert result.is_empty()


@pytest.mark.parametrize("a,b", list(itertools.product(ALL, repeat=2)))
def test_never_removes_target_packages(a: Profile, b: Profile):
    assert diff(a, b).to_remove & b.packages == set()


@pytest.mark.parametrize("a,b", list(itertools.product(ALL, repeat=2)))
def test_diff_is_symmetric(a: Profile, b: Profile):
    assert diff(a, b).to_remove == diff(b, a).to_install
    assert diff(a, b).to_install == diff(b, a).to_remove


def test_empty_profiles_give_one_sided_diffs():
    assert diff(EMPTY, GNOME) == DiffResult(frozenset(), frozenset({"gnome-shell", "gdm"}))
    assert diff(GNOME, EMPTY) == DiffResult(frozenset({"gnome-shell", "gdm"}), frozenset())


def test_sorted_accessors():
    result = diff(GNOME, KDE)

    assert result.sorted_remove() == ["gdm", "gnome-shell"]
    assert result.sorted_install() == ["plasma-desktop", "sddm"]
