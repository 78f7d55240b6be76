import os
import tempfile

import deswitch.core.output as output
from deswitch.core.script import GeneratedScript


def write_script(
    script: GeneratedScript, path: str, overwrite: bool = False, permissions: int = 0o755
) -> str:
    """
    Writes the script text to the given path and makes it executable. Missing parent directories
    are created. The file is replaced atomically, so a failed write never leaves a partial script.

    Returns the absolute path of the written script.

    Raises:
        FileExistsError
            If the path already exists and ``overwrite`` is not set.

        OSError
            If directory creation, writing or changing permissions fails.
    """
    path = os.path.abspath(path)

    if os.path.exists(path) and not overwrite:
        raise FileExistsError(f"'{path}' already exists.")

    directory = os.path.dirname(path)
    os.makedirs(directory, exist_ok=True)

    tmp = tempfile.NamedTemporaryFile(
        "wt",
        encoding="utf-8",
        dir=directory,
        prefix=".deswitch-",
        delete=False,
    )
    try:
        with tmp:
            tmp.write(script.text)
            tmp.flush()
            os.fsync(tmp.fileno())

        os.chmod(tmp.name, permissions)
        os.replace(tmp.name, path)
    except BaseException:
        os.unlink(tmp.name)
        raise


    output.print_debug(f"Wrote script to '{path}' with permissions {oct(permissions)}.")
    return path
