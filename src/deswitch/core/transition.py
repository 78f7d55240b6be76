import dataclasses
import shlex
import typing

import deswitch.config as config
from deswitch.core.profile import Profile


class DisplayManagerCommands:
    """
    Default commands for switching the display manager service.
    """

    def disable_unit(self, unit: str) -> list[str]:
        """
        Running this command disables the given systemd unit.
        """
        return ["systemctl", "disable", unit]

    def enable_unit(self, unit: str) -> list[str]:
        """
        Running this command enables the given systemd unit. ``--force`` replaces a leftover
        ``display-manager.service`` alias pointing to another display manager.
        """
        return ["systemctl", "enable", "--force", unit]


@dataclasses.dataclass(frozen=True)
class DisplayManagerTransition:
    """
    Display manager services to disable and enable. Both ``None`` means nothing changes.
    """

    disable: typing.Optional[str] = None
    enable: typing.Optional[str] = None

    def is_empty(self) -> bool:
        return self.disable is None and self.enable is None

    def leaves_no_display_manager(self) -> bool:
        """
        Returns True if a display manager is disabled and none is enabled in its place.
        """
        return self.disable is not None and self.enable is None

    def lines(self, commands: typing.Optional[DisplayManagerCommands] = None) -> list[str]:
        """
        Returns the shell lines performing this transition. The disable line always comes before
        the enable line.

        A failing disable never stops the script: the old display manager may already be
        uninstalled, and the enable line has to run regardless.
        """
        if commands is None:
            commands = DisplayManagerCommands()

        sudo = [config.sudo_command] if config.sudo_command else []
        lines = []
        if self.disable is not None:
            disable = shlex.join(sudo + commands.disable_unit(self.disable))
            lines.append(f"{disable} 2>/dev/null || true")
        if self.enable is not None:
            lines.append(shlex.join(sudo + commands.enable_unit(self.enable)))
        return lines


def plan(current: Profile, target: Profile) -> DisplayManagerTransition:
    """
    Plans the display manager switch from the current profile to the target profile.

    If both profiles use the same display manager, or neither uses one, the transition is empty.
    """
    if current.display_manager == target.display_manager:
        return DisplayManagerTransition()

    return DisplayManagerTransition(
        disable=current.display_manager,
        enable=target.display_manager,
    )
