import enum
import shlex
import typing

import deswitch.config as config
import deswitch.core.error as errors


class PackageManagerKind(enum.Enum):
    """
    Package manager front ends the generated script can use.
    """

    PACMAN = "pacman"
    YAY = "yay"
    PARU = "paru"

    @classmethod
    def parse(cls, name: str) -> "PackageManagerKind":
        """
        Returns the kind with the given name.

        If the name doesn't match any kind, raises UnsupportedPackageManagerError.
        """
        try:
            return cls(name.strip().lower())
        except ValueError as error:
            raise errors.UnsupportedPackageManagerError(name) from error

    @classmethod
    def names(cls) -> list[str]:
        return [kind.value for kind in cls]


class PackageManagerCommands:
    """
    Commands used in generated scripts for one package manager.

    Methods returning ``list[str]`` build argument vectors. Methods ending in ``_line`` render a
    shell line for the script or ``None`` if there is nothing to do.
    """

    def __init__(
        self,
        kind: PackageManagerKind,
        program: list[str],
        install_flags: list[str],
        remove_flags: list[str],
    ) -> None:
        self.kind = kind
        self._program = program
        self._install_flags = install_flags
        self._remove_flags = remove_flags

    def list_installed(self, pkgs: typing.Iterable[str]) -> list[str]:
        """
        Running this command outputs a newline seperated list of the given packages that are
        installed. Packages that are not installed are reported on stderr.
        """
        return ["pacman", "-Qq"] + sorted(pkgs)

    def list_installed_group_members(self, groups: typing.Iterable[str]) -> list[str]:
        """
        Running this command outputs a newline seperated list of the installed members of the
        given package groups. Names that are not groups are reported on stderr.
        """
        return ["pacman", "-Qqg"] + sorted(groups)

    def install(self, pkgs: typing.Iterable[str]) -> list[str]:
        """
        Running this command installs the given packages without asking for confirmation.
        Already installed packages are not reinstalled.
        """
        return self._program + self._install_flags + sorted(pkgs)

    def remove(self, pkgs: typing.Iterable[str] = ()) -> list[str]:
        """
        Running this command removes the given packages and their dependencies
        (that aren't required by other packages) without asking for confirmation.
        """
        return self._program + self._remove_flags + sorted(pkgs)

    def install_line(self, pkgs: typing.Collection[str]) -> typing.Optional[str]:
        """
        Returns the shell line installing the given packages.

        Returns ``None`` if ``pkgs`` is empty.
        """
        if not pkgs:
            return None
        return shlex.join(self.install(pkgs))

    def remove_line(self, pkgs: typing.Collection[str]) -> typing.Optional[str]:
        """
        Returns the shell line removing the given packages.

        Names are resolved when the script runs: installed packages are kept as they are and
        package groups are expanded to their installed members. Only installed packages are passed
        to the package manager, so running the line again after a successful removal does nothing.

        Returns ``None`` if ``pkgs`` is empty.
        """
        if not pkgs:
            return None
        installed = shlex.join(self.list_installed(pkgs))
        members = shlex.join(self.list_installed_group_members(pkgs))
        return (
            f"{{ {installed} || true; {members} || true; }} 2>/dev/null | sort -u "
            f"| xargs -r {shlex.join(self.remove())}"
        )


def commands_for(kind: PackageManagerKind) -> PackageManagerCommands:
    """
    Returns the commands for the given package manager.

    If the kind is not a known package manager, raises UnsupportedPackageManagerError.
    """
    match kind:
        case PackageManagerKind.PACMAN:
            sudo = [config.sudo_command] if config.sudo_command else []
            return PackageManagerCommands(
                kind,
                program=sudo + ["pacman"],
                install_flags=["-S", "--needed", "--noconfirm"],
                remove_flags=["-Rns", "--noconfirm"],
            )
        case PackageManagerKind.YAY:
            return PackageManagerCommands(
                kind,
                program=["yay"],
                install_flags=[
                    "-S",
                    "--needed",
                    "--noconfirm",
                    "--answerclean",
                    "None",
                    "--answerdiff",
                    "None",
                ],
                remove_flags=["-Rns", "--noconfirm"],
            )
        case PackageManagerKind.PARU:
            return PackageManagerCommands(
                kind,
                program=["paru"],
                install_flags=["-S", "--needed", "--noconfirm", "--skipreview"],
                remove_flags=["-Rns", "--noconfirm"],
            )
        case _:
            raise errors.UnsupportedPackageManagerError(str(kind))
