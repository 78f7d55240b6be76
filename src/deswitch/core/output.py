import os
import shutil
import sys
import traceback
import typing

import deswitch.config as config

_TAG_TEXT = "[DESWITCH]"
_CONTINUATION_PREFIX_TEXT = f"{_TAG_TEXT}     "

INFO = 1
SUMMARY = 2


def has_ansi_support() -> bool:
    """
    Returns True if the running terminal supports ANSI colors or if colors should be enabled.
    """
    if os.environ.get("NO_COLOR") is not None:
        return False
    if os.environ.get("FORCE_COLOR") is not None:
        return True

    if not sys.stdout.isatty():
        return False

    term = os.environ.get("TERM", "")
    return term not in ("", "dumb")


def _color(code: str, text: str) -> str:
    if not config.color_output:
        return text
    return f"\033[{code}m{text}\033[m"


def _tag() -> str:
    if not config.color_output:
        return _TAG_TEXT
    return f"[{_color('1;34', 'DESWITCH')}]"


def _stream() -> typing.TextIO:
    return sys.stderr if config.stderr_output else sys.stdout


def _emit(label: str, msg: str):
    print(f"{_tag()} {label}: {msg}", file=_stream())


def _visible(level: int) -> bool:
    return level == SUMMARY or config.debug_output or not config.quiet_output


def print_continuation(msg: str, level: int = SUMMARY):
    """
    Prints a message without a prefix.
    """
    if _visible(level):
        print(f"{_tag()}     {msg}", file=_stream())


def print_error(error_msg: str):
    """
    Prints an error message to the user.
    """
    _emit(_color("91", "ERROR"), error_msg)


def print_warning(msg: str):
    _emit(_color("93", "WARNING"), msg)


def print_summary(msg: str):
    _emit(_color("96", "SUMMARY"), msg)


def print_info(msg: str):
    """
    Prints a detailed message to the user if verbose output is not disabled.
    """
    if _visible(INFO):
        _emit("INFO", msg)


def print_debug(msg: str):
    """
    Prints a detailed message to the user if debug messages are enabled.
    """
    if config.debug_output:
        _emit(_color("90", "DEBUG"), msg)


def print_traceback():
    """
    Prints the traceback of the exception currently being handled if debug messages are enabled.
    """
    if not config.debug_output:
        return

    for line in traceback.format_exc().rstrip("\n").split("\n"):
        print_debug(line)


def print_list(msg: str, list_to_print: list[str], level: int = SUMMARY):
    """
    Prints a message followed by the elements of the list, wrapped to the terminal width.

    If the list is empty, prints nothing.
    """
    if not list_to_print or not _visible(level):
        return

    if level == SUMMARY:
        print_summary(msg)
    else:
        print_info(msg)

    width = shutil.get_terminal_size().columns - len(_CONTINUATION_PREFIX_TEXT)

    print_continuation("", level=level)
    line = ""
    for element in list_to_print:
        if line and len(line) + 1 + len(element) > width:
            print_continuation(line, level=level)
            line = element
        else:
            line = f"{line} {element}" if line else element
    print_continuation(line, level=level)
    print_continuation("", level=level)


def print_choices(msg: str, choices: list[str], highlight: typing.Optional[int] = None):
    """
    Prints a numbered list of choices. Numbering starts from 1.

    The choice at index ``highlight`` is marked, e.g. the currently running desktop.
    """
    print_summary(msg)
    width = len(str(len(choices)))
    for index, choice in enumerate(choices):
        marker = _color("92", " *") if index == highlight else ""
        print_continuation(f"{index + 1:>{width}}) {choice}{marker}")


def _input(prompt: str) -> str:
    # input() writes the prompt to stdout
    if config.stderr_output:
        sys.stderr.write(prompt)
        sys.stderr.flush()
        prompt = ""
    return input(prompt).strip()


def prompt_number(
    msg: str,
    min_num: int,
    max_num: int,
    default: typing.Optional[int] = None,
) -> int:
    """
    Prompts the user for an integer between ``min_num`` and ``max_num``. An empty answer selects
    ``default`` if one is given.
    """
    while True:
        answer = _input(f"{_tag()} {_color('92', 'PROMPT')}: {msg}")

        if default is not None and answer == "":
            return default

        if answer.isdigit() and min_num <= int(answer) <= max_num:
            return int(answer)

        print_error("Invalid input.")


def prompt_confirm(msg: str, default: typing.Optional[bool] = None) -> bool:
    """
    Prompts the user for a yes or no answer.
    """
    options = "(y/n)"
    if default is not None:
        options = "(Y/n)" if default else "(y/N)"

    while True:
        answer = _input(f"{_tag()} {_color('92', 'PROMPT')} {options}: {msg} ").lower()

        if default is not None and answer == "":
            return default

        if answer in ("y", "ye", "yes"):
            return True

        if answer in ("n", "no"):
            return False

        print_error("Invalid input.")
