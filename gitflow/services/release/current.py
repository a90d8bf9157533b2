from __future__ import annotations

from dataclasses import dataclass

from gitflow.core.result import Err, Ok, Result
from gitflow.output.console import ConsoleProtocol
from gitflow.services.release.config import FlowConfig
from gitflow.services.release.errors import FlowError
from gitflow.services.release.gateway import RepositoryGateway
from gitflow.services.release.semver import parse_version, sanitize


@dataclass(frozen=True, slots=True)
class CurrentRelease:
    version: str
    tag: str | None  # None until the first release is published


def current_release_version(
    *,
    gateway: RepositoryGateway,
    config: FlowConfig,
    console: ConsoleProtocol,
) -> Result[CurrentRelease, FlowError]:
    """Version of the latest published release, or the configured initial version."""
    latest = gateway.get_latest_release()
    if isinstance(latest, Err):
        return latest

    if latest.value is None:
        console.print(
            f"no previous release found, using initial version v{config.initial_version}"
        )
        return Ok(CurrentRelease(version=config.initial_version, tag=None))

    tag = latest.value.tag
    if parse_version(tag) is None:
        console.warning(
            f"latest release tag {tag!r} is not a semantic version, "
            f"using initial version v{config.initial_version}"
        )
    return Ok(CurrentRelease(version=sanitize(tag, config.initial_version), tag=tag))
