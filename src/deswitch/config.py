"""
Module for deswitch configuration options.

NOTE: Do NOT use from imports as global variables might not work as you expect.

Only use:

import deswitch.config

or

import deswitch.config as whatever

-- Configuring generated scripts --

``sudo_command`` is prepended to commands in the generated script that need root. The AUR
helpers (yay, paru) escalate privileges on their own and are never prefixed.

``shell`` is the interpreter written to the shebang line of generated scripts.
"""

debug_output: bool = False
quiet_output: bool = False
color_output: bool = True

# Messages go to stderr, e.g. while the script itself is printed to stdout
stderr_output: bool = False

sudo_command: str = "sudo"
shell: str = "/bin/bash"

catalog_file: str = "/etc/deswitch/profiles.json"
