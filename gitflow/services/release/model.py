from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


VersionIncrement = Literal["major", "minor", "patch"]
PullRequestRole = Literal["release", "hotfix", "feature", "undetermined"]
CompareStatus = Literal["identical", "ahead", "behind", "diverged"]


@dataclass(frozen=True, slots=True)
class Label:
    name: str
    color: str


@dataclass(frozen=True, slots=True)
class BranchInfo:
    name: str
    sha: str


@dataclass(frozen=True, slots=True)
class CompareInfo:
    status: str
    ahead_by: int
    behind_by: int

    @property
    def identical(self) -> bool:
        return self.status == "identical"


@dataclass(frozen=True, slots=True)
class PullRequestInfo:
    """The fields of a pull request the workflows consume."""

    number: int
    title: str
    body: str
    base_branch: str
    head_branch: str
    head_sha: str
    labels: frozenset[str]
    merged: bool = False
    merge_commit_sha: str | None = None
    url: str | None = None

    @property
    def release_sha(self) -> str:
        # Squash/rebase merges produce a new commit on base; tag that one.
        return self.merge_commit_sha or self.head_sha


@dataclass(frozen=True, slots=True)
class TagInfo:
    tag: str
    sha: str  # tag object sha, what refs/tags/<tag> must point at


@dataclass(frozen=True, slots=True)
class ReleaseInfo:
    tag: str
    url: str | None = None


@dataclass(frozen=True, slots=True)
class Merged:
    sha: str | None  # None when there was nothing to merge


@dataclass(frozen=True, slots=True)
class MergeConflict:
    message: str


type MergeOutcome = Merged | MergeConflict
