from __future__ import annotations

import json
import os
from pathlib import Path
from time import sleep
from urllib.parse import quote, urlencode

from gitflow.core.result import Err, Ok, Result
from gitflow.core.structured import (
    StrDict,
    as_obj_list,
    as_str_dict,
    get_bool,
    get_int,
    get_str,
    get_table,
    get_text,
)
from gitflow.platform.process import ProcessError
from gitflow.platform.process import run as run_process
from gitflow.services.release.config import Credentials
from gitflow.services.release.errors import FlowError
from gitflow.services.release.model import (
    BranchInfo,
    CompareInfo,
    Label,
    MergeConflict,
    Merged,
    MergeOutcome,
    PullRequestInfo,
    ReleaseInfo,
    TagInfo,
)
from gitflow.services.release.timeouts import (
    GH_READ_RETRY_ATTEMPTS,
    GH_READ_RETRY_DELAY_SECONDS,
    GH_TIMEOUT_SECONDS,
)


def _is_transient_gh_error(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    markers = (
        "timed out",
        "timeout",
        "connection reset",
        "connection refused",
        "temporarily unavailable",
        "service unavailable",
        "bad gateway",
        "gateway timeout",
        "tls handshake timeout",
        "network is unreachable",
        "http 429",
        "http 500",
        "http 502",
        "http 503",
        "http 504",
    )
    if error.returncode == -1 and "timed out" in text:
        return True
    return any(marker in text for marker in markers)


def _has_status(error: ProcessError, status: int) -> bool:
    return f"(http {status})" in error.stderr.lower()


def _api_message(error: ProcessError) -> str | None:
    # gh prints the JSON error document on stdout; GitHub puts the reason in "message".
    try:
        obj: object = json.loads(error.stdout)
    except json.JSONDecodeError:
        return None
    data = as_str_dict(obj)
    return get_str(data, "message") if data is not None else None


def _gateway_error(message: str, error: ProcessError, *, hint: str | None = None) -> FlowError:
    detail = _api_message(error) or error.stderr.strip()
    return FlowError(kind="gateway", message=message, hint=detail or hint)


def run_gh_read(
    *,
    workspace_root: Path,
    cmd: list[str],
    env: dict[str, str] | None = None,
    timeout: float = GH_TIMEOUT_SECONDS,
    retry_attempts: int = GH_READ_RETRY_ATTEMPTS,
) -> Result[str, ProcessError]:
    """Run an idempotent gh command, retrying transient failures."""
    attempts = max(1, retry_attempts)
    attempt = 0
    while True:
        result = run_process(cmd, cwd=workspace_root, env=env, timeout=timeout)
        if isinstance(result, Ok):
            return result

        attempt += 1
        if attempt >= attempts or not _is_transient_gh_error(result.error):
            return result
        sleep(GH_READ_RETRY_DELAY_SECONDS * attempt)


def _parse_label(obj: object) -> Label | None:
    data = as_str_dict(obj)
    if data is None:
        return None
    name = get_str(data, "name")
    if name is None:
        return None
    return Label(name=name, color=get_str(data, "color") or "")


def _parse_pull(data: StrDict) -> PullRequestInfo | None:
    number = get_int(data, "number")
    base = get_table(data, "base")
    head = get_table(data, "head")
    if number is None or base is None or head is None:
        return None

    base_ref = get_str(base, "ref")
    head_ref = get_str(head, "ref")
    head_sha = get_str(head, "sha")
    if base_ref is None or head_ref is None or head_sha is None:
        return None

    labels: set[str] = set()
    for item in as_obj_list(data.get("labels")) or []:
        label = _parse_label(item)
        if label is not None:
            labels.add(label.name)

    return PullRequestInfo(
        number=number,
        title=get_text(data, "title"),
        body=get_text(data, "body"),
        base_branch=base_ref,
        head_branch=head_ref,
        head_sha=head_sha,
        labels=frozenset(labels),
        merged=get_bool(data, "merged") or False,
        merge_commit_sha=get_str(data, "merge_commit_sha"),
        url=get_str(data, "html_url"),
    )


class GhGateway:
    """``RepositoryGateway`` backed by ``gh api``.

    The token is handed to gh through ``GH_TOKEN`` so no prior
    ``gh auth login`` is needed on CI runners.
    """

    def __init__(self, *, credentials: Credentials, workspace_root: Path | None = None) -> None:
        self._repo = credentials.repo
        self._owner = credentials.repo.split("/", 1)[0]
        self._root = workspace_root or Path.cwd()
        self._env = {**os.environ, "GH_TOKEN": credentials.token}

    def _endpoint(self, path: str) -> str:
        return f"repos/{self._repo}/{path}"

    def _read(self, path: str, *, missing_ok: bool = False) -> Result[object | None, FlowError]:
        endpoint = self._endpoint(path)
        result = run_gh_read(
            workspace_root=self._root,
            cmd=["gh", "api", endpoint],
            env=self._env,
        )
        if isinstance(result, Err):
            if missing_ok and _has_status(result.error, 404):
                return Ok(None)
            return Err(_gateway_error(f"gh api failed: {endpoint}", result.error, hint=endpoint))
        return self._decode(result.value, endpoint)

    def _write(
        self, method: str, path: str, payload: dict[str, object]
    ) -> Result[object | None, ProcessError | FlowError]:
        endpoint = self._endpoint(path)
        result = run_process(
            ["gh", "api", "--method", method, endpoint, "--input", "-"],
            cwd=self._root,
            env=self._env,
            stdin=json.dumps(payload),
            timeout=GH_TIMEOUT_SECONDS,
        )
        if isinstance(result, Err):
            return result
        if not result.value.strip():
            return Ok(None)
        return self._decode(result.value, endpoint)

    def _write_or_fail(
        self, method: str, path: str, payload: dict[str, object], *, message: str
    ) -> Result[StrDict, FlowError]:
        result = self._write(method, path, payload)
        if isinstance(result, Err):
            error = result.error
            if isinstance(error, ProcessError):
                return Err(_gateway_error(message, error))
            return Err(error)
        data = as_str_dict(result.value)
        if data is None:
            return Err(FlowError(kind="gateway", message=f"unexpected payload: {message}"))
        return Ok(data)

    @staticmethod
    def _decode(stdout: str, endpoint: str) -> Result[object | None, FlowError]:
        try:
            obj: object = json.loads(stdout)
        except json.JSONDecodeError as e:
            return Err(
                FlowError(
                    kind="gateway",
                    message=f"gh api returned invalid JSON: {e}",
                    hint=endpoint,
                )
            )
        return Ok(obj)

    # Labels

    def find_label(self, name: str) -> Result[Label | None, FlowError]:
        result = self._read(f"labels/{quote(name, safe='')}", missing_ok=True)
        if isinstance(result, Err):
            return result
        if result.value is None:
            return Ok(None)
        return Ok(_parse_label(result.value))

    def create_label(self, name: str, color: str) -> Result[Label, FlowError]:
        result = self._write_or_fail(
            "POST",
            "labels",
            {"name": name, "color": color},
            message=f"failed to create label {name!r}",
        )
        if isinstance(result, Err):
            return result
        label = _parse_label(result.value)
        if label is None:
            return Err(FlowError(kind="gateway", message=f"unexpected label payload: {name}"))
        return Ok(label)

    def add_labels(self, names: list[str], number: int) -> Result[list[Label], FlowError]:
        result = self._write("POST", f"issues/{number}/labels", {"labels": names})
        if isinstance(result, Err):
            error = result.error
            if isinstance(error, ProcessError):
                return Err(_gateway_error(f"failed to label pull request #{number}", error))
            return Err(error)
        out: list[Label] = []
        for item in as_obj_list(result.value) or []:
            label = _parse_label(item)
            if label is not None:
                out.append(label)
        return Ok(out)

    # Branches and refs

    def get_branch(self, name: str) -> Result[BranchInfo | None, FlowError]:
        result = self._read(f"branches/{quote(name)}", missing_ok=True)
        if isinstance(result, Err):
            return result
        data = as_str_dict(result.value)
        if data is None:
            return Ok(None)
        commit = get_table(data, "commit")
        sha = get_str(commit, "sha") if commit is not None else None
        if sha is None:
            return Err(FlowError(kind="gateway", message=f"missing commit sha for branch {name}"))
        return Ok(BranchInfo(name=get_str(data, "name") or name, sha=sha))

    def _ref_exists(self, ref: str) -> Result[bool, FlowError]:
        result = self._read(f"git/ref/{quote(ref)}", missing_ok=True)
        if isinstance(result, Err):
            return result
        data = as_str_dict(result.value)
        # git/ref returns a list when the name is only a prefix of existing refs.
        return Ok(data is not None and get_str(data, "ref") == f"refs/{ref}")

    def branch_exists(self, name: str) -> Result[bool, FlowError]:
        return self._ref_exists(f"heads/{name}")

    def tag_exists(self, name: str) -> Result[bool, FlowError]:
        return self._ref_exists(f"tags/{name}")

    def create_ref(self, ref: str, sha: str) -> Result[str, FlowError]:
        result = self._write_or_fail(
            "POST", "git/refs", {"ref": ref, "sha": sha}, message=f"failed to create ref {ref}"
        )
        if isinstance(result, Err):
            return result
        return Ok(get_str(result.value, "ref") or ref)

    def compare_commits(self, base: str, head: str) -> Result[CompareInfo, FlowError]:
        result = self._read(f"compare/{quote(base)}...{quote(head)}")
        if isinstance(result, Err):
            return result

        data = as_str_dict(result.value)
        if data is None:
            return Err(
                FlowError(kind="gateway", message=f"unexpected compare payload: {self._repo}")
            )

        status = get_str(data, "status")
        if status is None:
            return Err(FlowError(kind="gateway", message=f"missing compare status: {self._repo}"))

        ahead_by = get_int(data, "ahead_by")
        behind_by = get_int(data, "behind_by")
        if ahead_by is None or behind_by is None:
            return Err(
                FlowError(kind="gateway", message=f"invalid compare ahead/behind: {self._repo}")
            )

        return Ok(CompareInfo(status=status, ahead_by=ahead_by, behind_by=behind_by))

    def merge_branch(self, base: str, head: str) -> Result[MergeOutcome, FlowError]:
        result = self._write(
            "POST",
            "merges",
            {"base": base, "head": head, "commit_message": f"Merge {head} into {base}"},
        )
        if isinstance(result, Err):
            error = result.error
            if isinstance(error, ProcessError):
                if _has_status(error, 409):
                    return Ok(MergeConflict(message=_api_message(error) or "merge conflict"))
                return Err(_gateway_error(f"failed to merge {head} into {base}", error))
            return Err(error)

        # 204 No Content: base already contains head.
        data = as_str_dict(result.value)
        return Ok(Merged(sha=get_str(data, "sha") if data is not None else None))

    # Pull requests

    def _pull_or_fail(self, data: StrDict, what: str) -> Result[PullRequestInfo, FlowError]:
        pull = _parse_pull(data)
        if pull is None:
            return Err(
                FlowError(kind="gateway", message=f"unexpected pull request payload: {what}")
            )
        return Ok(pull)

    def get_pull_request(self, number: int) -> Result[PullRequestInfo, FlowError]:
        result = self._read(f"pulls/{number}")
        if isinstance(result, Err):
            return result
        data = as_str_dict(result.value) or {}
        return self._pull_or_fail(data, f"#{number}")

    def find_pull_requests(self, base: str, head: str) -> Result[list[PullRequestInfo], FlowError]:
        query = urlencode(
            {"state": "open", "base": base, "head": f"{self._owner}:{head}", "per_page": 100}
        )
        result = self._read(f"pulls?{query}")
        if isinstance(result, Err):
            return result

        raw = as_obj_list(result.value)
        if raw is None:
            return Err(FlowError(kind="gateway", message=f"unexpected pulls payload: {self._repo}"))

        out: list[PullRequestInfo] = []
        for item in raw:
            data = as_str_dict(item)
            if data is None:
                continue
            pull = _parse_pull(data)
            if pull is not None:
                out.append(pull)
        return Ok(out)

    def create_pull_request(
        self, *, title: str, body: str, base: str, head: str
    ) -> Result[PullRequestInfo, FlowError]:
        result = self._write_or_fail(
            "POST",
            "pulls",
            {"title": title, "body": body, "base": base, "head": head},
            message=f"failed to create pull request {head} -> {base}",
        )
        if isinstance(result, Err):
            return result
        return self._pull_or_fail(result.value, f"{head} -> {base}")

    def update_pull_request(self, number: int, *, body: str) -> Result[PullRequestInfo, FlowError]:
        result = self._write_or_fail(
            "PATCH",
            f"pulls/{number}",
            {"body": body},
            message=f"failed to update pull request #{number}",
        )
        if isinstance(result, Err):
            return result
        return self._pull_or_fail(result.value, f"#{number}")

    # Tags and releases

    def create_tag(self, tag: str, sha: str, message: str) -> Result[TagInfo, FlowError]:
        result = self._write_or_fail(
            "POST",
            "git/tags",
            {"tag": tag, "message": message, "object": sha, "type": "commit"},
            message=f"failed to create tag {tag}",
        )
        if isinstance(result, Err):
            return result
        tag_sha = get_str(result.value, "sha")
        if tag_sha is None:
            return Err(FlowError(kind="gateway", message=f"missing sha for tag {tag}"))
        return Ok(TagInfo(tag=get_str(result.value, "tag") or tag, sha=tag_sha))

    def create_release(self, *, tag: str, body: str, target: str) -> Result[ReleaseInfo, FlowError]:
        result = self._write_or_fail(
            "POST",
            "releases",
            {"tag_name": tag, "target_commitish": target, "name": tag, "body": body},
            message=f"failed to create release {tag}",
        )
        if isinstance(result, Err):
            return result
        return Ok(
            ReleaseInfo(
                tag=get_str(result.value, "tag_name") or tag,
                url=get_str(result.value, "html_url"),
            )
        )

    def release_exists(self, tag: str) -> Result[bool, FlowError]:
        result = self._read(f"releases/tags/{quote(tag, safe='')}", missing_ok=True)
        if isinstance(result, Err):
            return result
        return Ok(as_str_dict(result.value) is not None)

    def get_latest_release(self) -> Result[ReleaseInfo | None, FlowError]:
        result = self._read("releases/latest", missing_ok=True)
        if isinstance(result, Err):
            return result
        data = as_str_dict(result.value)
        if data is None:
            return Ok(None)
        tag = get_str(data, "tag_name")
        if tag is None:
            return Ok(None)
        return Ok(ReleaseInfo(tag=tag, url=get_str(data, "html_url")))

    def generate_release_notes(
        self, *, tag: str, previous_tag: str | None, target: str
    ) -> Result[str, FlowError]:
        payload: dict[str, object] = {"tag_name": tag, "target_commitish": target}
        if previous_tag is not None:
            payload["previous_tag_name"] = previous_tag
        # Read-only despite being a POST; nothing is persisted on GitHub.
        result = self._write_or_fail(
            "POST",
            "releases/generate-notes",
            payload,
            message=f"failed to generate release notes for {tag}",
        )
        if isinstance(result, Err):
            return result
        return Ok(get_text(result.value, "body"))
