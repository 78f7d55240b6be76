"""
Composition of the switch script from a profile diff and a display manager transition.
"""

import dataclasses
import re
import shlex
import typing

import deswitch.config as config
import deswitch.core.diff as _diff
import deswitch.core.manager as manager
import deswitch.core.output as output
import deswitch.core.profile as profile
import deswitch.core.transition as transition

_BANNER_RULE = "# " + "-" * 52


@dataclasses.dataclass(frozen=True)
class ScriptSection:
    """
    A named group of consecutive script lines.
    """

    name: str
    lines: tuple[str, ...]

    def render(self) -> str:
        return "\n".join(self.lines) + "\n"


@dataclasses.dataclass(frozen=True)
class GeneratedScript:
    """
    A generated switch script. Sections are in the order they appear in the text.
    """

    current_id: str
    target_id: str
    manager: manager.PackageManagerKind
    file_name: str
    sections: tuple[ScriptSection, ...]
    packages: _diff.DiffResult = _diff.DiffResult()
    display_manager: transition.DisplayManagerTransition = transition.DisplayManagerTransition()

    @property
    def text(self) -> str:
        return "\n".join(section.render() for section in self.sections)

    def section_names(self) -> list[str]:
        return [section.name for section in self.sections]

    def section(self, name: str) -> typing.Optional[ScriptSection]:
        for section in self.sections:
            if section.name == name:
                return section
        return None


def script_file_name(current: profile.Profile, target: profile.Profile) -> str:
    """
    Returns the default file name for a script switching from ``current`` to ``target``.
    """
    return f"deswitch_{_safe_name(current.id)}_to_{_safe_name(target.id)}.sh"


def compose(
    current_id: str,
    target_id: str,
    kind: manager.PackageManagerKind | str,
    catalog: typing.Optional[profile.ProfileCatalog] = None,
    script_name: typing.Optional[str] = None,
) -> GeneratedScript:
    """
    Composes a script switching from the current profile to the target profile.

    The script is built from these sections, in order. Sections with nothing to do are left out.
        - header: shebang and a banner asking the user to review the script
        - remove: removal of packages the target profile doesn't need
        - install: installation of packages of the target profile
        - display-manager: disabling the old and enabling the new display manager
        - reboot: interactive reboot prompt

    The same arguments always produce the same text.

    Parameters:
        catalog:
            Catalog to look the profiles up from. Defaults to the built-in catalog.

        script_name:
            File name mentioned in the banner. Defaults to ``script_file_name``.

    ``current_id`` may be ``UNKNOWN_PROFILE_ID`` when the installed desktop is not in the catalog.
    Then nothing is removed and only the target profile is installed and its display manager
    enabled.

    Raises:
        ``ProfileNotFoundError``
            If either profile is not in the catalog.

        ``UnsupportedPackageManagerError``
            If ``kind`` is not a supported package manager.
    """
    if catalog is None:
        catalog = profile.default_catalog()

    current = catalog.lookup_current(current_id)
    target = catalog.lookup(target_id)

    if isinstance(kind, str):
        kind = manager.PackageManagerKind.parse(kind)
    commands = manager.commands_for(kind)

    pkg_diff = _diff.diff(current, target)
    dm_transition = transition.plan(current, target)

    output.print_debug(
        f"Switching '{current.id}' -> '{target.id}' with {kind.value}: "
        f"{len(pkg_diff.to_remove)} to remove, {len(pkg_diff.to_install)} to install, "
        f"display manager {dm_transition.disable} -> {dm_transition.enable}."
    )

    if script_name is None:
        script_name = script_file_name(current, target)

    sections = [_header(current, target, kind, script_name, pkg_diff, dm_transition)]

    remove_line = commands.remove_line(pkg_diff.to_remove)
    if remove_line is not None:
        sections.append(
            ScriptSection(
                "remove",
                (
                    f"# Remove packages of {_comment(current.label)} not used by "
                    f"{_comment(target.label)}",
                    _echo(f"Removing packages of {current.label}..."),
                    remove_line,
                ),
            )
        )

    install_line = commands.install_line(pkg_diff.to_install)
    if install_line is not None:
        sections.append(
            ScriptSection(
                "install",
                (
                    f"# Install packages of {_comment(target.label)}",
                    _echo(f"Installing packages of {target.label}..."),
                    install_line,
                ),
            )
        )

    if not dm_transition.is_empty():
        sections.append(_display_manager_section(target, dm_transition))

    sections.append(_reboot_section())

    return GeneratedScript(
        current_id=current.id,
        target_id=target.id,
        manager=kind,
        file_name=script_name,
        sections=tuple(sections),
        packages=pkg_diff,
        display_manager=dm_transition,
    )


def _header(
    current: profile.Profile,
    target: profile.Profile,
    kind: manager.PackageManagerKind,
    script_name: str,
    pkg_diff: _diff.DiffResult,
    dm_transition: transition.DisplayManagerTransition,
) -> ScriptSection:
    lines = [
        f"#!{config.shell}",
        _BANNER_RULE,
        "# Generated by deswitch",
        f"# Current profile: {_comment(current.label)} ({_comment(current.id)})",
        f"# Target profile: {_comment(target.label)} ({_comment(target.id)})",
        f"# Package manager: {kind.value}",
        "#",
        "# REVIEW THIS SCRIPT BEFORE RUNNING.",
        "# Log out of the graphical session and run it from a TTY:",
        f"#   bash {_comment(script_name)}",
        _BANNER_RULE,
        "set -e",
        "",
        _echo(f"Switching from {current.label} to {target.label} using {kind.value}..."),
    ]

    if current == profile.UNKNOWN_PROFILE:
        lines.append(
            _echo(
                "The previous desktop is not in the profile catalog. "
                "Its packages are not removed. Remove them manually."
            )
        )

    if pkg_diff.is_empty() and dm_transition.is_empty():
        lines.append(_echo("The profiles do not differ. Nothing to change."))

    return ScriptSection("header", tuple(lines))


def _display_manager_section(
    target: profile.Profile, dm_transition: transition.DisplayManagerTransition
) -> ScriptSection:
    lines = [f"# Switch the display manager to {_comment(dm_transition.enable or 'none')}"]

    if dm_transition.leaves_no_display_manager():
        lines += [
            f"# {_comment(target.label)} doesn't use a display manager.",
            _echo(
                f"{target.label} does not use a display manager. "
                "After rebooting, log in on a TTY and start it manually."
            ),
        ]
    else:
        lines.append(_echo(f"Enabling display manager {dm_transition.enable}..."))

    lines += dm_transition.lines()
    return ScriptSection("display-manager", tuple(lines))


def _reboot_section() -> ScriptSection:
    reboot = shlex.join([config.sudo_command, "reboot"] if config.sudo_command else ["reboot"])
    return ScriptSection(
        "reboot",
        (
            "# Reboot",
            'echo ""',
            _echo("Switch complete. You MUST reboot to finish the switch."),
            'read -r -p "Reboot now? [y/N]: " response',
            'case "$response" in',
            "    [yY][eE][sS]|[yY])",
            f"        {reboot}",
            "        ;;",
            "    *)",
            "        " + _echo("Please reboot manually to complete the switch."),
            "        ;;",
            "esac",
        ),
    )


def _echo(msg: str) -> str:
    return f"echo {shlex.quote(_comment(msg))}"


def _comment(text: str) -> str:
    # Newlines would end the comment
    return " ".join(text.split())


def _safe_name(text: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]", "_", text)
