"""Typed configuration for the release workflows.

One ``FlowConfig`` is built per invocation and threaded through every
workflow step by parameter. Values come from (lowest to highest
precedence) the defaults below, an optional TOML file and the GitHub
Actions inputs exported as ``INPUT_<NAME>`` environment variables.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import cast

from gitflow.core.result import Err, Ok, Result
from gitflow.core.structured import StrDict, as_str_dict, get_table
from gitflow.output.console import ConsoleProtocol
from gitflow.services.release.errors import FlowError
from gitflow.services.release.model import VersionIncrement
from gitflow.services.release.semver import parse_version

__all__ = [
    "FlowConfig",
    "Credentials",
    "INPUT_NAMES",
    "load_flow_config",
    "read_action_inputs",
    "read_config_file",
    "resolve_credentials",
]

DEFAULT_INITIAL_VERSION = "0.1.0"
DEFAULT_VERSION_INCREMENT: VersionIncrement = "patch"
DEFAULT_MAIN_BRANCH = "main"
DEFAULT_DEVELOP_BRANCH = "develop"
DEFAULT_RELEASE_BRANCH_PREFIX = "release/"
DEFAULT_HOTFIX_BRANCH_PREFIX = "hotfix/"
DEFAULT_RELEASE_LABEL = "release"
DEFAULT_RELEASE_LABEL_COLOR = "#0366d6"

INPUT_NAMES: tuple[str, ...] = (
    "strict",
    "initial_version",
    "version_increment",
    "main_branch",
    "develop_branch",
    "release_branch_prefix",
    "hotfix_branch_prefix",
    "release_label",
    "release_label_color",
)

_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")
_REPO_RE = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")
_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


@dataclass(frozen=True, slots=True)
class FlowConfig:
    """Branching and versioning policy for one run."""

    strict: bool = False
    initial_version: str = DEFAULT_INITIAL_VERSION
    version_increment: VersionIncrement = DEFAULT_VERSION_INCREMENT
    main_branch: str = DEFAULT_MAIN_BRANCH
    develop_branch: str = DEFAULT_DEVELOP_BRANCH
    release_branch_prefix: str = DEFAULT_RELEASE_BRANCH_PREFIX
    hotfix_branch_prefix: str = DEFAULT_HOTFIX_BRANCH_PREFIX
    release_label: str = DEFAULT_RELEASE_LABEL
    release_label_color: str = DEFAULT_RELEASE_LABEL_COLOR

    @property
    def release_label_color_hex(self) -> str:
        """Color as the GitHub API expects it (no leading ``#``)."""
        return self.release_label_color.lstrip("#")

    def release_branch(self, version: str) -> str:
        return f"{self.release_branch_prefix}{version}"

    def as_dict(self) -> dict[str, object]:
        return {
            "strict": self.strict,
            "initial_version": self.initial_version,
            "version_increment": self.version_increment,
            "main_branch": self.main_branch,
            "develop_branch": self.develop_branch,
            "release_branch_prefix": self.release_branch_prefix,
            "hotfix_branch_prefix": self.hotfix_branch_prefix,
            "release_label": self.release_label,
            "release_label_color": self.release_label_color,
        }


@dataclass(frozen=True, slots=True)
class Credentials:
    token: str
    repo: str  # owner/name


def _text(value: object) -> str | None:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        s = value.strip()
        return s or None
    return None


def _parse_strict(raw: str | None, console: ConsoleProtocol) -> bool:
    if raw is None:
        return False
    lowered = raw.lower()
    if lowered in _TRUE:
        return True
    if lowered not in _FALSE:
        console.warning(f"strict must be 'true' or 'false', got {raw!r}. Taking 'false'")
    return False


def _parse_increment(raw: str | None, console: ConsoleProtocol) -> VersionIncrement:
    if raw is None:
        return DEFAULT_VERSION_INCREMENT
    if raw not in ("major", "minor", "patch"):
        console.warning(
            f"version_increment must be one of 'major', 'minor', or 'patch'. "
            f"Taking '{DEFAULT_VERSION_INCREMENT}'"
        )
        return DEFAULT_VERSION_INCREMENT
    return cast(VersionIncrement, raw)


def _parse_color(raw: str | None, console: ConsoleProtocol) -> str:
    if raw is None:
        return DEFAULT_RELEASE_LABEL_COLOR
    m = _COLOR_RE.match(raw)
    if m is None:
        console.warning(
            f"release_label_color must be a 6-digit hex color, got {raw!r}. "
            f"Taking '{DEFAULT_RELEASE_LABEL_COLOR}'"
        )
        return DEFAULT_RELEASE_LABEL_COLOR
    return f"#{m.group(1).lower()}"


def _parse_initial_version(raw: str | None, console: ConsoleProtocol) -> str:
    if raw is None:
        return DEFAULT_INITIAL_VERSION
    parsed = parse_version(raw)
    if parsed is None:
        console.warning(
            f"initial_version {raw!r} is not a semantic version. "
            f"Taking '{DEFAULT_INITIAL_VERSION}'"
        )
        return DEFAULT_INITIAL_VERSION
    return str(parsed)


def load_flow_config(
    *,
    inputs: Mapping[str, object],
    console: ConsoleProtocol,
) -> FlowConfig:
    """Build the run configuration from raw option values.

    Empty or missing values take their default. Invalid values are
    reported as warnings and replaced by their default; this never fails.
    """
    values = {name: _text(inputs.get(name)) for name in INPUT_NAMES}

    return FlowConfig(
        strict=_parse_strict(values["strict"], console),
        initial_version=_parse_initial_version(values["initial_version"], console),
        version_increment=_parse_increment(values["version_increment"], console),
        main_branch=values["main_branch"] or DEFAULT_MAIN_BRANCH,
        develop_branch=values["develop_branch"] or DEFAULT_DEVELOP_BRANCH,
        release_branch_prefix=values["release_branch_prefix"] or DEFAULT_RELEASE_BRANCH_PREFIX,
        hotfix_branch_prefix=values["hotfix_branch_prefix"] or DEFAULT_HOTFIX_BRANCH_PREFIX,
        release_label=values["release_label"] or DEFAULT_RELEASE_LABEL,
        release_label_color=_parse_color(values["release_label_color"], console),
    )


def read_action_inputs(environ: Mapping[str, str]) -> dict[str, str]:
    """Collect action inputs the way the Actions runner exports them.

    ``with: {main_branch: trunk}`` becomes ``INPUT_MAIN_BRANCH=trunk``.
    Unset and blank inputs are left out so lower layers can apply.
    """
    out: dict[str, str] = {}
    for name in INPUT_NAMES:
        value = environ.get(f"INPUT_{name.upper()}")
        if value is not None and value.strip():
            out[name] = value
    return out


def read_config_file(path: Path) -> Result[StrDict, FlowError]:
    """Parse a TOML config file; settings live under ``[gitflow]`` or at the root."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
    except FileNotFoundError:
        return Err(FlowError(kind="configuration", message=f"config file not found: {path}"))
    except PermissionError:
        return Err(FlowError(kind="configuration", message=f"permission denied reading: {path}"))
    except tomllib.TOMLDecodeError as e:
        return Err(
            FlowError(kind="configuration", message=f"invalid TOML syntax: {e}", hint=str(path))
        )
    except UnicodeDecodeError as e:
        return Err(
            FlowError(kind="configuration", message=f"error reading config: {e}", hint=str(path))
        )

    data = as_str_dict(data_obj)
    if data is None:
        return Err(FlowError(kind="configuration", message="config root must be a TOML table"))
    return Ok(get_table(data, "gitflow") or data)


def resolve_credentials(
    *,
    environ: Mapping[str, str],
    repo: str | None = None,
) -> Result[Credentials, FlowError]:
    token = (environ.get("GITHUB_TOKEN") or environ.get("GH_TOKEN") or "").strip()
    if not token:
        return Err(
            FlowError(
                kind="configuration",
                message="GITHUB_TOKEN is not defined",
                hint="pass the workflow token via env: GITHUB_TOKEN: ${{ secrets.GITHUB_TOKEN }}",
            )
        )

    slug = (repo or environ.get("GITHUB_REPOSITORY") or "").strip()
    if not slug:
        return Err(
            FlowError(
                kind="configuration",
                message="repository is not defined",
                hint="use --repo owner/name or set GITHUB_REPOSITORY",
            )
        )
    if _REPO_RE.match(slug) is None:
        return Err(
            FlowError(
                kind="configuration",
                message=f"invalid repository (expected owner/name): {slug}",
            )
        )

    return Ok(Credentials(token=token, repo=slug))
