import json
from pathlib import Path

import pytest

import deswitch.core.error as errors
import deswitch.core.profile as profile
from deswitch.core.profile import Profile, ProfileCatalog


@pytest.fixture
def catalog() -> ProfileCatalog:
    return ProfileCatalog(
        [
            Profile("gnome", "GNOME", {"gnome-shell", "gdm"}, "gdm", ("GNOME",)),
            Profile("kde", "KDE", {"plasma-desktop", "sddm"}, "sddm", ("KDE",)),
            Profile("sway", "Sway", {"sway"}, None, ("sway",)),
        ]
    )


def test_profile_normalizes_packages_and_desktop_names():
    p = Profile("x", "X", ["a", "b", "a"], None, ["X"])

    assert p.packages == frozenset({"a", "b"})
    assert p.desktop_names == ("X",)


def test_profile_is_immutable():
    p = Profile("x", "X")

    with pytest.raises(AttributeError):
        p.label = "Y"  # type: ignore[misc]


def test_lookup_returns_profile(catalog: ProfileCatalog):
    assert catalog.lookup("kde").display_manager == "sddm"


def test_lookup_missing_raises_profile_not_found(catalog: ProfileCatalog):
    with pytest.raises(errors.ProfileNotFoundError) as exc_info:
        catalog.lookup("xfce-unlisted")

    assert exc_info.value.profile_id == "xfce-unlisted"
    assert "xfce-unlisted" in exc_info.value.user_facing_msg


def test_catalog_rejects_duplicate_ids():
    with pytest.raises(errors.CatalogError):
        ProfileCatalog([Profile("a", "A"), Profile("a", "B")])


def test_catalog_container_protocol(catalog: ProfileCatalog):
    assert "gnome" in catalog
    assert "xfce" not in catalog
    assert len(catalog) == 3
    assert [p.id for p in catalog] == ["gnome", "kde", "sway"]
    assert catalog.ids() == ["gnome", "kde", "sway"]


def test_extended_overrides_and_adds_without_changing_catalog(catalog: ProfileCatalog):
    extended = catalog.extended(
        [Profile("kde", "KDE custom", {"plasma-meta"}, "sddm"), Profile("xfce", "Xfce")]
    )

    assert extended.lookup("kde").packages == frozenset({"plasma-meta"})
    assert "xfce" in extended
    assert "xfce" not in catalog
    assert catalog.lookup("kde").label == "KDE"


def test_default_catalog_profiles_are_consistent():
    catalog = profile.default_catalog()

    assert len(catalog) >= 10
    for p in catalog:
        assert p.packages
        # the display manager package ships with the profile
        if p.display_manager is not None:
            assert p.display_manager in p.packages or p.id == "cosmic"


def test_default_catalog_has_profiles_without_display_manager():
    catalog = profile.default_catalog()

    assert catalog.lookup("sway").display_manager is None
    assert catalog.lookup("gnome").display_manager == "gdm"
    assert catalog.lookup("kde-plasma").display_manager == "sddm"


def test_parse_profiles_defaults_label_to_id():
    [p] = profile.parse_profiles([{"id": "river", "packages": ["river"]}], "test")

    assert p.label == "river"
    assert p.display_manager is None
    assert p.desktop_names == ()


@pytest.mark.parametrize(
    "entries",
    [
        {"id": "x"},
        ["not a dict"],
        [{"packages": []}],
        [{"id": "", "packages": []}],
        [{"id": "x", "packages": "a b"}],
        [{"id": "x", "packages": [1, 2]}],
        [{"id": "x", "packages": [], "display_manager": ""}],
        [{"id": "x", "packages": [], "display_manager": 5}],
        [{"id": "x", "packages": [], "desktop_names": "X"}],
    ],
)
def test_parse_profiles_rejects_malformed_entries(entries):
    with pytest.raises(errors.CatalogError):
        profile.parse_profiles(entries, "test")


def test_load_catalog_file(tmp_path: Path):
    path = tmp_path / "profiles.json"
    path.write_text(
        json.dumps(
            {
                "profiles": [
                    {
                        "id": "river",
                        "label": "River",
                        "packages": ["river", "foot"],
                        "display_manager": "greetd",
                        "desktop_names": ["river"],
                    }
                ]
            }
        ),
        encoding="utf-8",
    )

    [p] = profile.load_catalog_file(str(path))

    assert p == Profile("river", "River", {"river", "foot"}, "greetd", ("river",))


def test_load_catalog_file_invalid_json(tmp_path: Path):
    path = tmp_path / "profiles.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(errors.CatalogError) as exc_info:
        profile.load_catalog_file(str(path))

    assert exc_info.value.source == str(path)


def test_load_catalog_file_missing_profiles_key(tmp_path: Path):
    path = tmp_path / "profiles.json"
    path.write_text(json.dumps({"other": []}), encoding="utf-8")

    with pytest.raises(errors.CatalogError):
        profile.load_catalog_file(str(path))


def test_load_catalog_file_missing_file(tmp_path: Path):
    with pytest.raises(OSError):
        profile.load_catalog_file(str(tmp_path / "missing.json"))


@pytest.mark.parametrize(
    "desktop,expected",
    [
        ("GNOME", "gnome"),
        ("ubuntu:GNOME", "gnome"),
        ("kde", "kde"),
        ("sway", "sway"),
        ("Hyprland", None),
        ("", None),
    ],
)
def test_detect_current_profile(catalog: ProfileCatalog, desktop, expected):
    assert profile.detect_current_profile(catalog, {"XDG_CURRENT_DESKTOP": desktop}) == expected


def test_detect_current_profile_without_variable(catalog: ProfileCatalog):
    assert profile.detect_current_profile(catalog, {}) is None


def test_detect_current_profile_default_catalog():
    catalog = profile.default_catalog()

    assert profile.detect_current_profile(catalog, {"XDG_CURRENT_DESKTOP": "KDE"}) == "kde-plasma"
    assert profile.detect_current_profile(catalog, {"XDG_CURRENT_DESKTOP": "X-Cinnamon"}) == (
        "cinnamon"
    )


def test_example_catalog_file_extends_default_catalog():
    path = Path(__file__).parent.parent / "example" / "profiles.json"

    catalog = profile.default_catalog().extended(profile.load_catalog_file(str(path)))

    assert catalog.lookup("river").display_manager == "greetd"
    assert "plasma-meta" in catalog.lookup("kde-plasma").packages


def test_lookup_current_accepts_unknown_desktop(catalog: ProfileCatalog):
    unknown = catalog.lookup_current(profile.UNKNOWN_PROFILE_ID)

    assert unknown is profile.UNKNOWN_PROFILE
    assert unknown.packages == frozenset()
    assert unknown.display_manager is None
    assert catalog.lookup_current("kde").id == "kde"
    with pytest.raises(errors.ProfileNotFoundError):
        catalog.lookup(profile.UNKNOWN_PROFILE_ID)
    with pytest.raises(errors.ProfileNotFoundError):
        catalog.lookup_current("xfce-unlisted")


def test_catalog_entry_named_unknown_wins():
    catalog = ProfileCatalog([Profile(profile.UNKNOWN_PROFILE_ID, "Mine", {"x"}, "ly")])

    assert catalog.lookup_current(profile.UNKNOWN_PROFILE_ID).packages == frozenset({"x"})
