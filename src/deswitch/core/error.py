"""
Module for deswitch errors.
"""


class UserFacingError(Exception):
    """
    Generating a script failed and the program shouldn't continue.

    The message is meant to be shown to the user as is.
    """

    def __init__(self, user_facing_msg: str):
        self.user_facing_msg = user_facing_msg
        super().__init__(user_facing_msg)


class ProfileNotFoundError(UserFacingError):
    """
    Raised when a profile identifier is not present in the catalog.

    Attributes:
        profile_id (str): The identifier that was looked up.
    """

    def __init__(self, profile_id: str) -> None:
        self.profile_id = profile_id
        super().__init__(f"The profile '{profile_id}' is not in the profile catalog.")


class UnsupportedPackageManagerError(UserFacingError):
    """
    Raised when a package manager has no known commands.

    Attributes:
        manager (str): The package manager that caused the exception.
    """

    def __init__(self, manager: str) -> None:
        self.manager = manager
        super().__init__(f"The package manager '{manager}' is not supported.")


class CatalogError(UserFacingError):
    """
    Raised when profile catalog data is invalid.

    Attributes:
        source (str): Where the invalid data came from, usually a file path.
        reason (str): What is wrong with the data.
    """

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid profile catalog '{source}': {reason}.")
