"""Release notes stored in a pull request body.

The release pull request body is the only place the version pair of an
in-flight release is kept between the dispatch and synchronize runs. It is
carried in an HTML comment so it stays invisible in the rendered
description:

    <!-- gitflow:notes:start -->
    ...notes generated by GitHub...
    <!-- gitflow:notes:end -->

    <!-- gitflow:meta
    {"previous_version": "0.1.0", "next_version": "0.1.1"}
    -->

Text outside the two delimited regions belongs to humans and is never
rewritten.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass

from gitflow.core.structured import as_str_dict, get_str
from gitflow.services.release.semver import parse_version

NOTES_START = "<!-- gitflow:notes:start -->"
NOTES_END = "<!-- gitflow:notes:end -->"
META_START = "<!-- gitflow:meta"
META_END = "-->"

# Bodies saved from the GitHub web editor use CRLF line endings.
_META_RE = re.compile(
    re.escape(META_START) + r"\r?\n(?P<payload>.*?)\r?\n" + re.escape(META_END), re.S
)
_NOTES_RE = re.compile(re.escape(NOTES_START) + r".*?" + re.escape(NOTES_END), re.S)


@dataclass(frozen=True, slots=True)
class NotesMeta:
    previous_version: str | None
    next_version: str | None


def _serialize_meta(meta: NotesMeta) -> str:
    payload: dict[str, str] = {}
    if meta.previous_version is not None:
        payload["previous_version"] = meta.previous_version
    if meta.next_version is not None:
        payload["next_version"] = meta.next_version
    return f"{META_START}\n{json.dumps(payload)}\n{META_END}"


def _notes_section(generated: str) -> str:
    return f"{NOTES_START}\n{generated.strip()}\n{NOTES_END}"


def _append_block(body: str, block: str) -> str:
    if not body:
        return f"{block}\n"
    if body.endswith("\n"):
        return f"{body}\n{block}\n"
    return f"{body}\n\n{block}\n"


def _canonical(value: str | None) -> str | None:
    if value is None:
        return None
    parsed = parse_version(value)
    return str(parsed) if parsed is not None else None


def embed_meta(body: str, meta: NotesMeta) -> str:
    """Write ``meta`` into ``body``, replacing an existing block in place."""
    block = _serialize_meta(meta)
    m = _META_RE.search(body)
    if m is None:
        return _append_block(body, block)
    return body[: m.start()] + block + body[m.end() :]


def extract_meta(body: str | None) -> NotesMeta | None:
    """Read the version pair back; None when there is no readable block.

    A field that is missing or not a version comes back as None.
    """
    if not body:
        return None
    m = _META_RE.search(body)
    if m is None:
        return None
    try:
        obj: object = json.loads(m.group("payload"))
    except json.JSONDecodeError:
        return None
    data = as_str_dict(obj)
    if data is None:
        return None
    return NotesMeta(
        previous_version=_canonical(get_str(data, "previous_version")),
        next_version=_canonical(get_str(data, "next_version")),
    )


def strip_meta(body: str) -> str:
    """Body without the metadata block, for publishing as a release."""
    m = _META_RE.search(body)
    if m is None:
        return body
    return (body[: m.start()].rstrip() + "\n" + body[m.end() :].lstrip("\r\n")).strip() + "\n"


def merge_generated_notes(existing: str | None, generated: str) -> str:
    """Swap the generated section of ``existing`` for ``generated``.

    Without a generated section yet, one is inserted right before the
    metadata block, or appended when there is no block either.
    """
    body = existing or ""
    section = _notes_section(generated)

    m = _NOTES_RE.search(body)
    if m is not None:
        return body[: m.start()] + section + body[m.end() :]

    meta = _META_RE.search(body)
    if meta is None:
        return _append_block(body, section)
    return body[: meta.start()] + section + "\n\n" + body[meta.start() :]


def render_release_notes(generated: str, meta: NotesMeta) -> str:
    """Fresh pull request body for a new release."""
    return embed_meta(_notes_section(generated) + "\n", meta)
