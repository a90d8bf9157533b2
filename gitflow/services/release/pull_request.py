from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from gitflow.core.result import Err, Ok, Result
from gitflow.output.console import ConsoleProtocol, Style
from gitflow.services.release.classify import classify
from gitflow.services.release.config import FlowConfig
from gitflow.services.release.current import current_release_version
from gitflow.services.release.errors import FlowError
from gitflow.services.release.gateway import RepositoryGateway
from gitflow.services.release.model import MergeConflict, PullRequestInfo, PullRequestRole
from gitflow.services.release.notes import extract_meta, merge_generated_notes, strip_meta
from gitflow.services.release.semver import (
    extract_version_from_branch_name,
    format_tag,
    hotfix_increment,
)

Reintegration = Literal["identical", "merged", "pull_request"]


@dataclass(frozen=True, slots=True)
class MergedOutcome:
    role: PullRequestRole
    reintegration: Reintegration | None = None
    version: str | None = None
    reintegration_pull: int | None = None


@dataclass(frozen=True, slots=True)
class SyncOutcome:
    role: PullRequestRole
    updated: bool = False


def _reintegrate(
    *, gateway: RepositoryGateway, config: FlowConfig, console: ConsoleProtocol
) -> Result[tuple[Reintegration, int | None], FlowError]:
    main, develop = config.main_branch, config.develop_branch

    merged = gateway.merge_branch(develop, main)
    if isinstance(merged, Err):
        return merged
    if not isinstance(merged.value, MergeConflict):
        console.print(f"on-pull-merge: {main} reintegrated into {develop}")
        return Ok(("merged", None))

    console.warning(
        f"on-pull-merge: could not reintegrate {main} into {develop}: {merged.value.message}"
    )

    existing = gateway.find_pull_requests(develop, main)
    if isinstance(existing, Err):
        return existing
    if existing.value:
        number = existing.value[0].number
        console.print(
            f"on-pull-merge: reintegration pull request #{number} already exists. Skipped!",
            Style.DIM,
        )
        return Ok(("pull_request", number))

    created = gateway.create_pull_request(
        title=f"Reintegrate {main} into {develop}",
        body=f"This pull request reintegrates the {main} branch into the {develop} branch.",
        base=develop,
        head=main,
    )
    if isinstance(created, Err):
        return created
    console.print(f"on-pull-merge: reintegration pull request #{created.value.number} created!")
    return Ok(("pull_request", created.value.number))


def _release_version(
    *,
    role: PullRequestRole,
    pull: PullRequestInfo,
    gateway: RepositoryGateway,
    config: FlowConfig,
    console: ConsoleProtocol,
) -> Result[str, FlowError]:
    if role == "release":
        return extract_version_from_branch_name(pull.head_branch, config.release_branch_prefix)

    current = current_release_version(gateway=gateway, config=config, console=console)
    if isinstance(current, Err):
        return current
    return hotfix_increment(current.value.version)


def _publish(
    *,
    version: str,
    pull: PullRequestInfo,
    gateway: RepositoryGateway,
    config: FlowConfig,
    console: ConsoleProtocol,
) -> Result[None, FlowError]:
    tag = format_tag(version)

    exists = gateway.tag_exists(tag)
    if isinstance(exists, Err):
        return exists
    if exists.value:
        console.print(f"on-pull-merge: tag {tag} already exists. Skipped!", Style.DIM)
    else:
        created = gateway.create_tag(tag, pull.release_sha, f"Release {tag}")
        if isinstance(created, Err):
            return created
        ref = gateway.create_ref(f"refs/tags/{tag}", created.value.sha)
        if isinstance(ref, Err):
            return ref
        console.print(f"on-pull-merge: tag {tag} created at {pull.release_sha}")

    released = gateway.release_exists(tag)
    if isinstance(released, Err):
        return released
    if released.value:
        console.print(f"on-pull-merge: release {tag} already exists. Skipped!", Style.DIM)
        return Ok(None)

    release = gateway.create_release(
        tag=tag, body=strip_meta(pull.body), target=config.main_branch
    )
    if isinstance(release, Err):
        return release
    console.print(f"on-pull-merge: release {tag} created!")
    return Ok(None)


def run_pull_request_merged(
    *,
    pull: PullRequestInfo,
    gateway: RepositoryGateway,
    config: FlowConfig,
    console: ConsoleProtocol,
) -> Result[MergedOutcome, FlowError]:
    """Reintegrate main into develop and publish the release after a merge into main."""
    if not pull.merged:
        console.print(f"on-pull-merge: pull request #{pull.number} is not merged. Skipped!")
        return Ok(MergedOutcome(role=classify(pull.base_branch, pull.head_branch, config)))

    role = classify(pull.base_branch, pull.head_branch, config)
    if role == "undetermined":
        return Err(
            FlowError(
                kind="classification",
                message=f"could not determine pull request type for #{pull.number}",
                hint=f"{pull.head_branch} -> {pull.base_branch}",
            )
        )
    console.print(f"on-pull-merge: pull request type detected: {role}")

    if role == "feature":
        console.print(
            f"on-pull-merge: branch merged to {config.develop_branch}, nothing to do", Style.DIM
        )
        return Ok(MergedOutcome(role=role))

    main, develop = config.main_branch, config.develop_branch
    compare = gateway.compare_commits(develop, main)
    if isinstance(compare, Err):
        return compare
    if compare.value.identical:
        console.print(f"on-pull-merge: {main} and {develop} are identical, nothing to do")
        return Ok(MergedOutcome(role=role, reintegration="identical"))

    reintegrated = _reintegrate(gateway=gateway, config=config, console=console)
    if isinstance(reintegrated, Err):
        return reintegrated
    reintegration, reintegration_pull = reintegrated.value

    version = _release_version(
        role=role, pull=pull, gateway=gateway, config=config, console=console
    )
    if isinstance(version, Err):
        return Err(
            FlowError(
                kind="version",
                message=f"could not determine {role} version",
                hint=version.error.message,
            )
        )
    console.print(f"on-pull-merge: {role} version is v{version.value}")

    published = _publish(
        version=version.value, pull=pull, gateway=gateway, config=config, console=console
    )
    if isinstance(published, Err):
        return published

    console.success(f"on-pull-merge: v{version.value} released")
    return Ok(
        MergedOutcome(
            role=role,
            reintegration=reintegration,
            version=version.value,
            reintegration_pull=reintegration_pull,
        )
    )


def run_pull_request_synchronize(
    *,
    pull: PullRequestInfo,
    gateway: RepositoryGateway,
    config: FlowConfig,
    console: ConsoleProtocol,
) -> Result[SyncOutcome, FlowError]:
    """Refresh the generated notes of a release pull request after new commits."""
    role = classify(pull.base_branch, pull.head_branch, config)
    console.print(f"on-pull-sync: pull request type detected: {role}")
    if role != "release":
        console.print("on-pull-sync: pull is not a release branch, nothing to do", Style.DIM)
        return Ok(SyncOutcome(role=role))

    meta = extract_meta(pull.body)
    if meta is None or meta.previous_version is None:
        return Err(
            FlowError(
                kind="missing_metadata",
                message="could not determine current version from pull request body",
                hint=f"pull request #{pull.number}",
            )
        )
    if meta.next_version is None:
        return Err(
            FlowError(
                kind="missing_metadata",
                message="could not determine next version from pull request body",
                hint=f"pull request #{pull.number}",
            )
        )
    console.print(
        f"on-pull-sync: versions v{meta.previous_version} -> v{meta.next_version}", Style.DIM
    )

    previous_tag: str | None = format_tag(meta.previous_version)
    exists = gateway.tag_exists(format_tag(meta.previous_version))
    if isinstance(exists, Err):
        return exists
    if not exists.value:
        console.print(
            f"on-pull-sync: tag {previous_tag} not found, notes cover the full history",
            Style.DIM,
        )
        previous_tag = None

    notes = gateway.generate_release_notes(
        tag=format_tag(meta.next_version), previous_tag=previous_tag, target=pull.head_branch
    )
    if isinstance(notes, Err):
        return notes

    body = merge_generated_notes(pull.body, notes.value)
    if body == pull.body:
        console.print(f"on-pull-sync: notes for v{meta.next_version} unchanged", Style.DIM)
        return Ok(SyncOutcome(role=role))

    updated = gateway.update_pull_request(pull.number, body=body)
    if isinstance(updated, Err):
        return updated
    console.success(f"on-pull-sync: pull request #{pull.number} notes updated")
    return Ok(SyncOutcome(role=role, updated=True))
