import argparse
import os
import sys
import typing

import deswitch.config as conf
import deswitch.core.error as errors
import deswitch.core.manager as manager
import deswitch.core.output as output
import deswitch.core.profile as profile
import deswitch.core.script as script
import deswitch.core.writer as writer


def main():
    """
    Main entry for the CLI app
    """

    parser = argparse.ArgumentParser(
        prog="deswitch",
        description="Generate a script that switches the desktop environment of an Arch Linux "
        "installation",
        epilog="The generated script is not run. Review it and run it from a TTY.",
    )

    parser.add_argument("--current", action="store", help="id of the installed profile")
    parser.add_argument("--target", action="store", help="id of the profile to switch to")
    parser.add_argument(
        "--manager",
        action="store",
        help="package manager used by the script: "
        + ", ".join(manager.PackageManagerKind.names()),
    )
    parser.add_argument("--output", "-o", action="store", help="path of the generated script")
    parser.add_argument(
        "--catalog", action="store", help="JSON file with additional or overriding profiles"
    )
    parser.add_argument(
        "--list", action="store_true", default=False, help="list known profiles and exit"
    )
    parser.add_argument(
        "--print",
        action="store_true",
        default=False,
        help="print the script to stdout instead of writing it",
    )
    parser.add_argument(
        "--force", action="store_true", default=False, help="overwrite an existing script file"
    )
    parser.add_argument("--debug", action="store_true", default=False, help="show debug output")
    parser.add_argument(
        "--quiet", action="store_true", default=False, help="show only summaries and errors"
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        default=False,
        help="don't print messages with color",
    )

    args = parser.parse_args()

    conf.debug_output = args.debug
    conf.quiet_output = args.quiet
    conf.stderr_output = args.print

    if args.no_color or args.print:
        conf.color_output = False
    else:
        conf.color_output = output.has_ansi_support()

    if not run_deswitch(args):
        sys.exit(1)


def run_deswitch(args: argparse.Namespace, environ: typing.Mapping[str, str] = os.environ) -> bool:
    """
    Runs deswitch with the given arguments.

    Returns ``True`` if executed succesfully. Otherwise ``False``. Errors are printed to the user.
    """
    try:
        catalog = load_catalog(args.catalog)

        if args.list:
            print_catalog(catalog, profile.detect_current_profile(catalog, environ))
            return True

        current_id, target_id, kind = _select(args, catalog, environ)
        generated = script.compose(
            current_id,
            target_id,
            kind,
            catalog=catalog,
            script_name=os.path.basename(args.output) if args.output else None,
        )
    except errors.UserFacingError as error:
        output.print_error(error.user_facing_msg)
        output.print_traceback()
        return False
    except OSError as error:
        output.print_error(f"Failed to read the profile catalog: {error.strerror or str(error)}.")
        output.print_traceback()
        return False
    except (EOFError, KeyboardInterrupt):
        output.print_error("Aborted.")
        return False

    if args.print:
        sys.stdout.write(generated.text)
        return True

    _print_plan(generated)
    return _write(generated, args)


def load_catalog(catalog_file: typing.Optional[str]) -> profile.ProfileCatalog:
    """
    Returns the built-in catalog extended with profiles from the given file. If no file is given,
    the file configured in ``config.catalog_file`` is used when it exists.

    Raises:
        ``CatalogError``
            If the file contains invalid profiles.

        ``OSError``
            If reading the file fails.
    """
    catalog = profile.default_catalog()

    if catalog_file is None:
        if not os.path.exists(conf.catalog_file):
            return catalog
        catalog_file = conf.catalog_file

    output.print_info(f"Loading profiles from '{catalog_file}'.")
    return catalog.extended(profile.load_catalog_file(catalog_file))


def print_catalog(catalog: profile.ProfileCatalog, current_id: typing.Optional[str]):
    output.print_summary("Known profiles:")
    for p in catalog:
        dm = p.display_manager or "no display manager"
        marker = " (current)" if p.id == current_id else ""
        output.print_continuation(f"{p.id}: {p.label}, {dm}{marker}")


def _select(
    args: argparse.Namespace,
    catalog: profile.ProfileCatalog,
    environ: typing.Mapping[str, str],
) -> tuple[str, str, manager.PackageManagerKind]:
    ids = catalog.ids()
    interactive = sys.stdin.isatty()

    current_id = args.current
    if current_id is None:
        current_id = profile.detect_current_profile(catalog, environ)
        if current_id is not None:
            output.print_info(f"Detected current profile '{current_id}'.")
        elif interactive:
            output.print_warning(
                "The running desktop is not in the profile catalog. Select "
                f"'{profile.UNKNOWN_PROFILE_ID}' to keep its packages and remove them manually."
            )
            choices = ids
            if profile.UNKNOWN_PROFILE_ID not in catalog:
                choices = ids + [profile.UNKNOWN_PROFILE_ID]
            current_id = _choose("Select the installed profile", choices, None)
        else:
            output.print_warning(
                "The running desktop is not in the profile catalog. Its packages are not removed. "
                "Specify the installed profile with '--current' to remove them."
            )
            current_id = profile.UNKNOWN_PROFILE_ID

    target_id = args.target
    if target_id is None:
        if not interactive:
            raise errors.UserFacingError("Specify the target profile with '--target'.")
        highlight = ids.index(current_id) if current_id in ids else None
        target_id = _choose("Select the profile to switch to", ids, highlight)

    if args.manager is not None:
        kind = manager.PackageManagerKind.parse(args.manager)
    elif interactive:
        names = manager.PackageManagerKind.names()
        kind = manager.PackageManagerKind(_choose("Select the package manager", names, 0, True))
    else:
        kind = manager.PackageManagerKind.PACMAN

    return current_id, target_id, kind


def _choose(
    msg: str, choices: list[str], highlight: typing.Optional[int], default_highlight: bool = False
) -> str:
    output.print_choices(f"{msg}:", choices, highlight)
    default = highlight + 1 if default_highlight and highlight is not None else None
    num = output.prompt_number(f"Choice [1-{len(choices)}]: ", 1, len(choices), default=default)
    return choices[num - 1]


def _print_plan(generated: script.GeneratedScript):
    output.print_summary(
        f"Switching from '{generated.current_id}' to '{generated.target_id}' "
        f"using {generated.manager.value}."
    )
    output.print_list("Packages to remove:", generated.packages.sorted_remove(), level=output.INFO)
    output.print_list(
        "Packages to install:", generated.packages.sorted_install(), level=output.INFO
    )

    if generated.current_id == profile.UNKNOWN_PROFILE_ID:
        output.print_warning(
            "Packages of the previous desktop are not removed. Remove them manually."
        )

    dm = generated.display_manager
    if dm.is_empty():
        output.print_info("Display manager stays unchanged.")
    else:
        output.print_info(f"Display manager: {dm.disable or 'none'} -> {dm.enable or 'none'}.")

    if dm.leaves_no_display_manager():
        output.print_warning(
            f"'{generated.target_id}' doesn't use a display manager. After the switch, the system "
            "boots to a TTY login."
        )


def _write(generated: script.GeneratedScript, args: argparse.Namespace) -> bool:
    path = args.output or generated.file_name
    overwrite = args.force

    if os.path.exists(path) and not overwrite and sys.stdin.isatty():
        try:
            overwrite = output.prompt_confirm(
                f"'{path}' already exists. Overwrite?", default=False
            )
        except (EOFError, KeyboardInterrupt):
            output.print_error("Aborted.")
            return False

    try:
        written = writer.write_script(generated, path, overwrite=overwrite)
    except FileExistsError:
        output.print_error(f"'{path}' already exists. Use '--force' to overwrite it.")
        return False
    except OSError as error:
        output.print_error(f"Failed to write script '{path}': {error.strerror or str(error)}.")
        output.print_traceback()
        return False

    output.print_summary(f"Script written to '{written}'.")
    output.print_summary("Next steps: review the script, log out and run it from a TTY:")
    output.print_continuation(f"bash {written}")
    return True
