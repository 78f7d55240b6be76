import dataclasses
import json
import typing

import deswitch.core.error as errors
import deswitch.core.output as output


@dataclasses.dataclass(frozen=True)
class Profile:
    """
    A desktop environment or window manager that can be switched to.

    Parameters:
        id:
            Stable unique key of the profile, e.g. ``"kde-plasma"``.

        label:
            Human readable name.

        packages:
            Names of the packages the profile requires.

        display_manager:
            Name of the display manager service the profile runs under. ``None`` when the
            profile is started without a display manager, e.g. from a TTY.

        desktop_names:
            Values of ``XDG_CURRENT_DESKTOP`` that identify a running session of this profile.
    """

    id: str
    label: str
    packages: frozenset[str] = frozenset()
    display_manager: typing.Optional[str] = None
    desktop_names: tuple[str, ...] = ()

    def __post_init__(self):
        # Accept any iterable for packages but always store a frozenset
        if not isinstance(self.packages, frozenset):
            object.__setattr__(self, "packages", frozenset(self.packages))
        if not isinstance(self.desktop_names, tuple):
            object.__setattr__(self, "desktop_names", tuple(self.desktop_names))


class ProfileCatalog:
    """
    Read-only lookup table of profiles keyed by their id.

    Iterating a catalog yields profiles in the order they were given.
    """

    def __init__(self, profiles: typing.Iterable[Profile], source: str = "<catalog>") -> None:
        self._profiles: dict[str, Profile] = {}
        for profile in profiles:
            if profile.id in self._profiles:
                raise errors.CatalogError(source, f"duplicate profile id '{profile.id}'")
            self._profiles[profile.id] = profile

    def lookup(self, profile_id: str) -> Profile:
        """
        Returns the profile with the given id.

        If the catalog doesn't contain the profile, raises ProfileNotFoundError.
        """
        try:
            return self._profiles[profile_id]
        except KeyError as error:
            raise errors.ProfileNotFoundError(profile_id) from error

    def lookup_current(self, profile_id: str) -> Profile:
        """
        Returns the profile with the given id as the profile switched away from.

        In addition to the ids in the catalog, accepts ``UNKNOWN_PROFILE_ID`` for a desktop missing
        from the catalog. Nothing is removed when switching away from it.

        If the id is neither, raises ProfileNotFoundError.
        """
        if profile_id == UNKNOWN_PROFILE_ID and profile_id not in self._profiles:
            return UNKNOWN_PROFILE
        return self.lookup(profile_id)

    def ids(self) -> list[str]:
        return list(self._profiles)

    def extended(self, profiles: typing.Iterable[Profile]) -> "ProfileCatalog":
        """
        Returns a new catalog with the given profiles added. A given profile replaces an existing
        profile with the same id.
        """
        merged = dict(self._profiles)
        for profile in profiles:
            if profile.id in merged:
                output.print_debug(f"Overriding profile '{profile.id}'.")
            merged[profile.id] = profile
        return ProfileCatalog(merged.values())

    def __contains__(self, profile_id: object) -> bool:
        return profile_id in self._profiles

    def __iter__(self) -> typing.Iterator[Profile]:
        return iter(self._profiles.values())

    def __len__(self) -> int:
        return len(self._profiles)

    def __repr__(self) -> str:
        return f"ProfileCatalog({', '.join(self._profiles)})"


UNKNOWN_PROFILE_ID = "unknown"

# Stands in for a desktop that is not in the catalog: no packages and no display manager
UNKNOWN_PROFILE = Profile(UNKNOWN_PROFILE_ID, "Unknown desktop")

# Compiled-in profiles. Sessions using lightdm get the GTK greeter unless the desktop ships its
# own greeter.
_DEFAULT_PROFILES: list[dict[str, typing.Any]] = [
    {
        "id": "kde-plasma",
        "label": "KDE Plasma",
        "packages": [
            "plasma-desktop",
            "plasma-nm",
            "plasma-pa",
            "kscreen",
            "powerdevil",
            "breeze-gtk",
            "xdg-desktop-portal-kde",
            "konsole",
            "dolphin",
            "ark",
            "sddm",
            "sddm-kcm",
        ],
        "display_manager": "sddm",
        "desktop_names": ["KDE"],
    },
    {
        "id": "gnome",
        "label": "GNOME",
        "packages": [
            "gnome-shell",
            "gnome-control-center",
            "gnome-terminal",
            "gnome-tweaks",
            "nautilus",
            "xdg-desktop-portal-gnome",
            "gdm",
        ],
        "display_manager": "gdm",
        "desktop_names": ["GNOME", "GNOME-Classic"],
    },
    {
        "id": "xfce4",
        "label": "Xfce",
        "packages": [
            "xfce4",
            "xfce4-goodies",
            "lightdm",
            "lightdm-gtk-greeter",
        ],
        "display_manager": "lightdm",
        "desktop_names": ["XFCE"],
    },
    {
        "id": "cinnamon",
        "label": "Cinnamon",
        "packages": [
            "cinnamon",
            "nemo-fileroller",
            "gnome-terminal",
            "lightdm",
            "lightdm-slick-greeter",
        ],
        "display_manager": "lightdm",
        "desktop_names": ["X-Cinnamon", "Cinnamon"],
    },
    {
        "id": "mate",
        "label": "MATE",
        "packages": [
            "mate",
            "mate-extra",
            "lightdm",
            "lightdm-gtk-greeter",
        ],
        "display_manager": "lightdm",
        "desktop_names": ["MATE"],
    },
    {
        "id": "budgie",
        "label": "Budgie",
        "packages": [
            "budgie",
            "gnome-terminal",
            "nemo",
            "lightdm",
            "lightdm-slick-greeter",
        ],
        "display_manager": "lightdm",
        "desktop_names": ["Budgie"],
    },
    {
        "id": "lxqt",
        "label": "LXQt",
        "packages": [
            "lxqt",
            "breeze-icons",
            "oxygen-icons",
            "sddm",
        ],
        "display_manager": "sddm",
        "desktop_names": ["LXQt"],
    },
    {
        "id": "lxde",
        "label": "LXDE",
        "packages": [
            "lxde",
            "lightdm",
            "lightdm-gtk-greeter",
        ],
        "display_manager": "lightdm",
        "desktop_names": ["LXDE"],
    },
    {
        "id": "i3",
        "label": "i3",
        "packages": [
            "i3-wm",
            "i3status",
            "i3lock",
            "dmenu",
            "xss-lock",
            "xterm",
            "lightdm",
            "lightdm-gtk-greeter",
        ],
        "display_manager": "lightdm",
        "desktop_names": ["i3"],
    },
    {
        "id": "cosmic",
        "label": "COSMIC",
        "packages": [
            "cosmic",
            "xdg-user-dirs",
        ],
        "display_manager": "cosmic-greeter",
        "desktop_names": ["COSMIC"],
    },
    {
        "id": "sway",
        "label": "Sway",
        "packages": [
            "sway",
            "swaybg",
            "swayidle",
            "swaylock",
            "foot",
            "wmenu",
            "xorg-xwayland",
        ],
        "display_manager": None,
        "desktop_names": ["sway"],
    },
    {
        "id": "hyprland",
        "label": "Hyprland",
        "packages": [
            "hyprland",
            "kitty",
            "wofi",
            "xdg-desktop-portal-hyprland",
        ],
        "display_manager": None,
        "desktop_names": ["Hyprland"],
    },
]


def default_catalog() -> ProfileCatalog:
    """
    Returns the compiled-in profile catalog.
    """
    return ProfileCatalog(parse_profiles(_DEFAULT_PROFILES, "<built-in>"), "<built-in>")


def parse_profiles(entries: typing.Any, source: str) -> list[Profile]:
    """
    Creates profiles from a list of plain dicts.

    Each dict must have the keys ``id`` and ``packages``. ``label``, ``display_manager`` and
    ``desktop_names`` are optional.

    If the data is malformed, raises CatalogError.
    """
    if not isinstance(entries, list):
        raise errors.CatalogError(source, "profiles must be a list")

    profiles = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise errors.CatalogError(source, f"profile at index {index} is not an object")

        profile_id = entry.get("id")
        if not isinstance(profile_id, str) or not profile_id:
            raise errors.CatalogError(source, f"profile at index {index} has no id")

        packages = entry.get("packages", [])
        if not isinstance(packages, list) or not all(isinstance(p, str) for p in packages):
            raise errors.CatalogError(source, f"packages of '{profile_id}' must be a list of names")

        display_manager = entry.get("display_manager")
        if display_manager is not None and (
            not isinstance(display_manager, str) or not display_manager
        ):
            raise errors.CatalogError(
                source, f"display_manager of '{profile_id}' must be a name or null"
            )

        desktop_names = entry.get("desktop_names", [])
        if not isinstance(desktop_names, list) or not all(
            isinstance(n, str) for n in desktop_names
        ):
            raise errors.CatalogError(
                source, f"desktop_names of '{profile_id}' must be a list of names"
            )

        profiles.append(
            Profile(
                id=profile_id,
                label=str(entry.get("label", profile_id)),
                packages=frozenset(packages),
                display_manager=display_manager,
                desktop_names=tuple(desktop_names),
            )
        )
    return profiles


def load_catalog_file(path: str) -> list[Profile]:
    """
    Reads profiles from a JSON file of the form ``{"profiles": [...]}``.

    Raises:
        OSError
            If reading the file fails.

        CatalogError
            If the file is not valid JSON or the profiles are malformed.
    """
    with open(path, "rt", encoding="utf-8") as file:
        try:
            content = json.load(file)
        except json.JSONDecodeError as error:
            raise errors.CatalogError(path, f"not valid JSON ({error.msg})") from error

    if not isinstance(content, dict) or "profiles" not in content:
        raise errors.CatalogError(path, "missing top level 'profiles' key")

    profiles = parse_profiles(content["profiles"], path)
    output.print_debug(f"Loaded {len(profiles)} profiles from '{path}'.")
    return profiles


def detect_current_profile(
    catalog: ProfileCatalog, environ: typing.Mapping[str, str]
) -> typing.Optional[str]:
    """
    Returns the id of the profile matching the running session according to
    ``XDG_CURRENT_DESKTOP``. Only the last ``:`` separated entry is considered.

    Returns ``None`` if the desktop is unknown.
    """
    raw = environ.get("XDG_CURRENT_DESKTOP", "")
    if not raw:
        return None

    desktop = raw.split(":")[-1].strip().lower()
    for profile in catalog:
        names = [n.lower() for n in profile.desktop_names]
        if desktop in names or desktop == profile.id.lower():
            output.print_debug(f"Detected desktop '{raw}' as profile '{profile.id}'.")
            return profile.id

    output.print_debug(f"Desktop '{raw}' doesn't match any profile.")
    return None
