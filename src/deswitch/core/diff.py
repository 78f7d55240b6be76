import dataclasses

from deswitch.core.profile import Profile


@dataclasses.dataclass(frozen=True)
class DiffResult:
    """
    Packages to remove and install when switching between two profiles.

    The sets have no order. Use ``sorted_remove`` and ``sorted_install`` when the order matters.
    """

    to_remove: frozenset[str] = frozenset()
    to_install: frozenset[str] = frozenset()

    def sorted_remove(self) -> list[str]:
        return sorted(self.to_remove)

    def sorted_install(self) -> list[str]:
        return sorted(self.to_install)

    def is_empty(self) -> bool:
        return not self.to_remove and not self.to_install


def diff(current: Profile, target: Profile) -> DiffResult:
    """
    Computes the packages that differ between the current and the target profile.

    Packages shared by both profiles are never removed. Dependencies are not resolved, that is
    left to the package manager.
    """
    return DiffResult(
        to_remove=current.packages - target.packages,
        to_install=target.packages - current.packages,
    )
