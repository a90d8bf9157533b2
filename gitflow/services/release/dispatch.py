from __future__ import annotations

from dataclasses import dataclass

from gitflow.core.result import Err, Ok, Result
from gitflow.output.console import ConsoleProtocol, Style
from gitflow.services.release.config import FlowConfig
from gitflow.services.release.current import current_release_version
from gitflow.services.release.errors import FlowError
from gitflow.services.release.gateway import RepositoryGateway
from gitflow.services.release.model import Label, PullRequestInfo
from gitflow.services.release.notes import NotesMeta, render_release_notes
from gitflow.services.release.semver import format_tag, increment


@dataclass(frozen=True, slots=True)
class DispatchOutcome:
    version: str
    branch: str
    pull: PullRequestInfo
    created_branch: bool
    created_pull: bool


def _ensure_label(
    *, gateway: RepositoryGateway, config: FlowConfig, console: ConsoleProtocol
) -> Result[Label, FlowError]:
    name = config.release_label
    console.print(f"on-dispatch: detect or create release label {name!r}...", Style.DIM)
    found = gateway.find_label(name)
    if isinstance(found, Err):
        return found
    if found.value is not None:
        console.print(f"on-dispatch: label {name!r} already exists. Skipped!", Style.DIM)
        return Ok(found.value)

    created = gateway.create_label(name, config.release_label_color_hex)
    if isinstance(created, Err):
        return Err(
            FlowError(
                kind="gateway",
                message=f"release label {name!r} not found and could not be created",
                hint=created.error.hint or created.error.message,
            )
        )
    console.print(f"on-dispatch: label {name!r} created!")
    return created


def _find_or_create_pull(
    *,
    gateway: RepositoryGateway,
    config: FlowConfig,
    console: ConsoleProtocol,
    branch: str,
    current_version: str,
    current_tag: str | None,
    next_version: str,
) -> Result[tuple[PullRequestInfo, bool], FlowError]:
    console.print(
        f"on-dispatch: fetching pull requests from {branch} to {config.main_branch}", Style.DIM
    )
    pulls = gateway.find_pull_requests(config.main_branch, branch)
    if isinstance(pulls, Err):
        return pulls
    if pulls.value:
        pull = pulls.value[0]
        console.print(
            f"on-dispatch: release pull request #{pull.number} already exists. Skipped!",
            Style.DIM,
        )
        return Ok((pull, False))

    tag = format_tag(next_version)
    console.print(f"on-dispatch: generating release notes for {tag}...", Style.DIM)
    notes = gateway.generate_release_notes(tag=tag, previous_tag=current_tag, target=branch)
    if isinstance(notes, Err):
        return notes

    body = render_release_notes(
        notes.value, NotesMeta(previous_version=current_version, next_version=next_version)
    )
    created = gateway.create_pull_request(
        title=f"Release {tag}", body=body, base=config.main_branch, head=branch
    )
    if isinstance(created, Err):
        return created
    console.print(f"on-dispatch: release pull request #{created.value.number} created!")
    return Ok((created.value, True))


def run_dispatch(
    *,
    gateway: RepositoryGateway,
    config: FlowConfig,
    console: ConsoleProtocol,
) -> Result[DispatchOutcome, FlowError]:
    """Cut the next release: branch off develop and open the release pull request.

    Every step checks the remote state first, so running it again after a
    partial failure picks up where the previous run stopped.
    """
    label = _ensure_label(gateway=gateway, config=config, console=console)
    if isinstance(label, Err):
        return label

    console.print("on-dispatch: detecting current release version...", Style.DIM)
    current = current_release_version(gateway=gateway, config=config, console=console)
    if isinstance(current, Err):
        return current
    current_version = current.value.version
    console.print(f"on-dispatch: current release version v{current_version}")

    next_version = increment(current_version, config.version_increment)
    if isinstance(next_version, Err):
        return Err(
            FlowError(
                kind="version",
                message=f"failed to increment version from v{current_version}",
                hint=next_version.error.message,
            )
        )
    version = next_version.value
    console.print(
        f"on-dispatch: release version incremented from v{current_version} to v{version} "
        f"({config.version_increment})"
    )

    develop = gateway.get_branch(config.develop_branch)
    if isinstance(develop, Err):
        return develop
    if develop.value is None:
        return Err(
            FlowError(kind="gateway", message=f"branch {config.develop_branch!r} not found")
        )
    console.print(
        f"on-dispatch: {config.develop_branch} branch fetched ({develop.value.sha})", Style.DIM
    )

    branch = config.release_branch(version)
    exists = gateway.branch_exists(branch)
    if isinstance(exists, Err):
        return exists
    if exists.value:
        console.print(f"on-dispatch: branch {branch} already exists. Skipped!", Style.DIM)
    else:
        ref = gateway.create_ref(f"refs/heads/{branch}", develop.value.sha)
        if isinstance(ref, Err):
            return ref
        console.print(f"on-dispatch: branch {branch} created from {config.develop_branch}")

    found = _find_or_create_pull(
        gateway=gateway,
        config=config,
        console=console,
        branch=branch,
        current_version=current_version,
        current_tag=current.value.tag,
        next_version=version,
    )
    if isinstance(found, Err):
        return found
    pull, created_pull = found.value

    if label.value.name in pull.labels:
        console.print(
            f"on-dispatch: {label.value.name} label exists for pull request #{pull.number}. "
            "Skipped!",
            Style.DIM,
        )
    else:
        added = gateway.add_labels([label.value.name], pull.number)
        if isinstance(added, Err):
            return added
        console.print(
            f"on-dispatch: {label.value.name} label added to pull request #{pull.number}"
        )

    console.success(f"on-dispatch: release process completed for v{version}")
    return Ok(
        DispatchOutcome(
            version=version,
            branch=branch,
            pull=pull,
            created_branch=not exists.value,
            created_pull=created_pull,
        )
    )
