"""Process exit codes.

The GitHub Actions runner only distinguishes zero from non-zero, but the
values stay stable so wrapper scripts can tell configuration mistakes
apart from remote failures.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success (including "nothing to do")
    - 1: Workflow error (undetermined PR role, bad version, missing metadata)
    - 2: Configuration error (missing token, repository or event payload)
    - 4: Network error (any GitHub API failure)
    """

    OK = 0
    WORKFLOW_ERROR = 1
    CONFIG_ERROR = 2
    NETWORK_ERROR = 4

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
