from __future__ import annotations

from gitflow.services.release.config import FlowConfig
from gitflow.services.release.model import PullRequestRole


def classify(base: str, head: str, config: FlowConfig) -> PullRequestRole:
    """Determine the role of a pull request from its branch names.

    First match wins. Outside strict mode every non-release pull request
    into main counts as a hotfix.
    """
    if base == config.main_branch and head.startswith(config.release_branch_prefix):
        return "release"

    if base == config.main_branch and (
        not config.strict or head.startswith(config.hotfix_branch_prefix)
    ):
        return "hotfix"

    if base == config.develop_branch:
        return "feature"

    return "undetermined"
