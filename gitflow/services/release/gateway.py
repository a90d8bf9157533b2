from __future__ import annotations

from typing import Protocol

from gitflow.core.result import Result
from gitflow.services.release.errors import FlowError
from gitflow.services.release.model import (
    BranchInfo,
    CompareInfo,
    Label,
    MergeOutcome,
    PullRequestInfo,
    ReleaseInfo,
    TagInfo,
)


class RepositoryGateway(Protocol):
    """Remote repository operations the release workflows depend on.

    Lookups return ``Ok(None)`` (or an empty list) when the entity does not
    exist; only transport and API failures are ``Err``. Merging reports a
    conflict as ``MergeConflict`` rather than an error.
    """

    def find_label(self, name: str) -> Result[Label | None, FlowError]: ...

    def create_label(self, name: str, color: str) -> Result[Label, FlowError]: ...

    def get_branch(self, name: str) -> Result[BranchInfo | None, FlowError]: ...

    def branch_exists(self, name: str) -> Result[bool, FlowError]: ...

    def tag_exists(self, name: str) -> Result[bool, FlowError]: ...

    def create_ref(self, ref: str, sha: str) -> Result[str, FlowError]: ...

    def compare_commits(self, base: str, head: str) -> Result[CompareInfo, FlowError]: ...

    def merge_branch(self, base: str, head: str) -> Result[MergeOutcome, FlowError]: ...

    def get_pull_request(self, number: int) -> Result[PullRequestInfo, FlowError]: ...

    def find_pull_requests(
        self, base: str, head: str
    ) -> Result[list[PullRequestInfo], FlowError]: ...

    def create_pull_request(
        self, *, title: str, body: str, base: str, head: str
    ) -> Result[PullRequestInfo, FlowError]: ...

    def update_pull_request(
        self, number: int, *, body: str
    ) -> Result[PullRequestInfo, FlowError]: ...

    def add_labels(self, names: list[str], number: int) -> Result[list[Label], FlowError]: ...

    def create_tag(self, tag: str, sha: str, message: str) -> Result[TagInfo, FlowError]: ...

    def create_release(
        self, *, tag: str, body: str, target: str
    ) -> Result[ReleaseInfo, FlowError]: ...

    def release_exists(self, tag: str) -> Result[bool, FlowError]: ...

    def get_latest_release(self) -> Result[ReleaseInfo | None, FlowError]: ...

    def generate_release_notes(
        self, *, tag: str, previous_tag: str | None, target: str
    ) -> Result[str, FlowError]: ...
