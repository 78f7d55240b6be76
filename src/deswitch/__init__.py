import os
import typing

# Re-exports
from deswitch.core.diff import DiffResult, diff
from deswitch.core.error import (
    CatalogError,
    ProfileNotFoundError,
    UnsupportedPackageManagerError,
    UserFacingError,
)
from deswitch.core.manager import PackageManagerCommands, PackageManagerKind, commands_for
from deswitch.core.profile import (
    UNKNOWN_PROFILE_ID,
    Profile,
    ProfileCatalog,
    default_catalog,
    detect_current_profile,
    load_catalog_file,
)
from deswitch.core.script import GeneratedScript, compose, script_file_name
from deswitch.core.transition import DisplayManagerTransition, plan
from deswitch.core.writer import write_script

__all__ = [
    "CatalogError",
    "DiffResult",
    "DisplayManagerTransition",
    "GeneratedScript",
    "PackageManagerCommands",
    "PackageManagerKind",
    "Profile",
    "ProfileCatalog",
    "ProfileNotFoundError",
    "UnsupportedPackageManagerError",
    "UserFacingError",
    "UNKNOWN_PROFILE_ID",
    "commands_for",
    "compose",
    "default_catalog",
    "detect_current_profile",
    "diff",
    "generate",
    "load_catalog_file",
    "plan",
    "script_file_name",
    "write_script",
]


def generate(
    current_id: str,
    target_id: str,
    manager: str = "pacman",
    output_path: typing.Optional[str] = None,
    catalog: typing.Optional[ProfileCatalog] = None,
    overwrite: bool = False,
) -> GeneratedScript:
    """
    Shortcut for composing a switch script and optionally writing it. Returns the script.

    Arguments:
        current_id:
            Id of the profile that is installed now, or ``UNKNOWN_PROFILE_ID`` if the installed
            desktop is not in the catalog.

        target_id:
            Id of the profile to switch to.

        manager:
            Name of the package manager used in the script: pacman, yay or paru.

        output_path:
            If set, the script is written to this path and made executable.

        catalog:
            Profile catalog. Defaults to the built-in catalog.

        overwrite:
            If True, an existing file at ``output_path`` is replaced.
    """
    script_name = None
    if output_path is not None:
        script_name = os.path.basename(output_path)

    script = compose(current_id, target_id, manager, catalog=catalog, script_name=script_name)

    if output_path is not None:
        write_script(script, output_path, overwrite=overwrite)

    return script
