"""Version math for release and hotfix numbering.

Versions flow through the workflows as canonical strings
(``major.minor.patch[-prerelease]``, no leading ``v``, no build
metadata). ``SemVer`` is the parsed form used for arithmetic.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from gitflow.core.result import Err, Ok, Result
from gitflow.services.release.errors import FlowError
from gitflow.services.release.model import VersionIncrement

HOTFIX_IDENTIFIER = "HOTFIX"

_NUM = r"0|[1-9]\d*"
_PRE_IDENT = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_SEMVER_RE = re.compile(
    rf"^(?P<major>{_NUM})\.(?P<minor>{_NUM})\.(?P<patch>{_NUM})"
    rf"(?:-(?P<pre>{_PRE_IDENT}(?:\.{_PRE_IDENT})*))?"
    r"(?:\+(?P<build>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


@dataclass(frozen=True, slots=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()

    def __str__(self) -> str:
        core = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            return f"{core}-{'.'.join(self.prerelease)}"
        return core

    def to_tag(self) -> str:
        return f"v{self}"

    @property
    def base(self) -> "SemVer":
        return SemVer(self.major, self.minor, self.patch)

    def bump(self, kind: VersionIncrement) -> "SemVer":
        match kind:
            case "major":
                return SemVer(self.major + 1, 0, 0)
            case "minor":
                return SemVer(self.major, self.minor + 1, 0)
            case "patch":
                return SemVer(self.major, self.minor, self.patch + 1)
            case _:
                raise AssertionError(f"unexpected increment kind: {kind}")


def parse_version(raw: str) -> SemVer | None:
    """Parse a loosely written version (``v1.2.3``, `` =1.2.3 ``, ``1.2.3+b1``)."""
    text = raw.strip()
    if text.startswith("="):
        text = text[1:].strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    m = _SEMVER_RE.match(text)
    if m is None:
        return None
    pre = m.group("pre")
    return SemVer(
        int(m.group("major")),
        int(m.group("minor")),
        int(m.group("patch")),
        tuple(pre.split(".")) if pre else (),
    )


def sanitize(raw: str | None, fallback: str) -> str:
    """Return the canonical form of ``raw``, or ``fallback`` when it is not a version."""
    if raw is None:
        return fallback
    parsed = parse_version(raw)
    if parsed is None:
        return fallback
    return str(parsed)


def format_tag(version: str) -> str:
    return f"v{version}"


def _parse_or_err(version: str) -> Result[SemVer, FlowError]:
    parsed = parse_version(version)
    if parsed is None:
        return Err(FlowError(kind="version", message=f"invalid version: {version!r}"))
    return Ok(parsed)


def increment(current: str, kind: VersionIncrement) -> Result[str, FlowError]:
    """Bump ``current`` by ``kind``; any prerelease is dropped first."""
    parsed = _parse_or_err(current)
    if isinstance(parsed, Err):
        return parsed
    return Ok(str(parsed.value.base.bump(kind)))


def hotfix_increment(current: str) -> Result[str, FlowError]:
    """Next hotfix prerelease after ``current``.

    ``1.0.0`` -> ``1.0.1-HOTFIX.0`` -> ``1.0.1-HOTFIX.1``. A prerelease with
    another identifier restarts the counter on the same base version.
    """
    parsed = _parse_or_err(current)
    if isinstance(parsed, Err):
        return parsed

    v = parsed.value
    if not v.prerelease:
        return Ok(str(SemVer(v.major, v.minor, v.patch + 1, (HOTFIX_IDENTIFIER, "0"))))

    pre = v.prerelease
    if len(pre) == 2 and pre[0] == HOTFIX_IDENTIFIER and pre[1].isdigit():
        counter = str(int(pre[1]) + 1)
        return Ok(str(SemVer(v.major, v.minor, v.patch, (HOTFIX_IDENTIFIER, counter))))

    return Ok(str(SemVer(v.major, v.minor, v.patch, (HOTFIX_IDENTIFIER, "0"))))


def extract_version_from_branch_name(branch: str, prefix: str) -> Result[str, FlowError]:
    """Read the version out of ``<prefix><version>`` branch names."""
    if not branch.startswith(prefix):
        return Err(
            FlowError(
                kind="version",
                message=f"branch {branch!r} does not start with {prefix!r}",
            )
        )
    remainder = branch[len(prefix) :]
    parsed = parse_version(remainder)
    if parsed is None:
        return Err(
            FlowError(
                kind="version",
                message=f"could not determine version from branch {branch!r}",
                hint=f"expected {prefix}<major>.<minor>.<patch>",
            )
        )
    return Ok(str(parsed))
