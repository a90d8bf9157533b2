from __future__ import annotations

from pathlib import Path

from gitflow.core.result import Err, Ok
from gitflow.output.console import MockConsole
from gitflow.services.release.config import (
    Credentials,
    FlowConfig,
    load_flow_config,
    read_action_inputs,
    read_config_file,
    resolve_credentials,
)


def test_defaults() -> None:
    console = MockConsole()
    config = load_flow_config(inputs={}, console=console)

    assert config == FlowConfig()
    assert config.strict is False
    assert config.initial_version == "0.1.0"
    assert config.version_increment == "patch"
    assert config.release_branch_prefix == "release/"
    assert config.hotfix_branch_prefix == "hotfix/"
    assert config.release_label == "release"
    assert config.release_label_color == "#0366d6"
    assert config.release_label_color_hex == "0366d6"
    assert not console.has_warning()


def test_custom_inputs() -> None:
    inputs = {
        "strict": "true",
        "initial_version": "v1.0.0",
        "version_increment": "minor",
        "main_branch": "master",
        "develop_branch": "dev",
        "release_branch_prefix": "rel/",
        "hotfix_branch_prefix": "fix/",
        "release_label": "rel",
        "release_label_color": "#FF0000",
    }
    config = load_flow_config(inputs=inputs, console=MockConsole())

    assert config == FlowConfig(
        strict=True,
        initial_version="1.0.0",
        version_increment="minor",
        main_branch="master",
        develop_branch="dev",
        release_branch_prefix="rel/",
        hotfix_branch_prefix="fix/",
        release_label="rel",
        release_label_color="#ff0000",
    )
    assert config.release_branch("1.1.0") == "rel/1.1.0"


def test_invalid_values_fall_back_with_warnings() -> None:
    console = MockConsole()
    config = load_flow_config(
        inputs={
            "version_increment": "invalid",
            "release_label_color": "blue",
            "initial_version": "one",
            "strict": "maybe",
        },
        console=console,
    )

    assert config.version_increment == "patch"
    assert config.release_label_color == "#0366d6"
    assert config.initial_version == "0.1.0"
    assert config.strict is False
    assert len(console.find("warning:")) == 4
    assert console.find("version_increment must be one of")


def test_blank_values_take_defaults() -> None:
    config = load_flow_config(
        inputs={"main_branch": "  ", "release_branch_prefix": "", "strict": True},
        console=MockConsole(),
    )
    assert config.main_branch == "main"
    assert config.release_branch_prefix == "release/"
    assert config.strict is True


def test_read_action_inputs() -> None:
    environ = {
        "INPUT_MAIN_BRANCH": "trunk",
        "INPUT_STRICT": "true",
        "INPUT_RELEASE_LABEL": "",
        "INPUT_UNKNOWN": "x",
        "PATH": "/usr/bin",
    }
    assert read_action_inputs(environ) == {"main_branch": "trunk", "strict": "true"}


def test_read_config_file_gitflow_table(tmp_path: Path) -> None:
    path = tmp_path / "gitflow.toml"
    path.write_text('[gitflow]\nmain_branch = "master"\nstrict = true\n', encoding="utf-8")

    result = read_config_file(path)
    assert isinstance(result, Ok)
    config = load_flow_config(inputs=result.value, console=MockConsole())
    assert config.main_branch == "master"
    assert config.strict is True


def test_read_config_file_root_table(tmp_path: Path) -> None:
    path = tmp_path / "gitflow.toml"
    path.write_text('version_increment = "major"\n', encoding="utf-8")
    assert read_config_file(path) == Ok({"version_increment": "major"})


def test_read_config_file_errors(tmp_path: Path) -> None:
    missing = read_config_file(tmp_path / "nope.toml")
    assert isinstance(missing, Err)
    assert missing.error.kind == "configuration"

    broken = tmp_path / "broken.toml"
    broken.write_text("main_branch = ", encoding="utf-8")
    result = read_config_file(broken)
    assert isinstance(result, Err)
    assert "invalid TOML" in result.error.message


def test_resolve_credentials() -> None:
    result = resolve_credentials(environ={"GITHUB_TOKEN": "t", "GITHUB_REPOSITORY": "acme/app"})
    assert result == Ok(Credentials(token="t", repo="acme/app"))

    override = resolve_credentials(environ={"GH_TOKEN": "t"}, repo="acme/other")
    assert override == Ok(Credentials(token="t", repo="acme/other"))


def test_resolve_credentials_requires_token() -> None:
    result = resolve_credentials(environ={"GITHUB_REPOSITORY": "acme/app"})
    assert isinstance(result, Err)
    assert result.error.kind == "configuration"
    assert result.error.message == "GITHUB_TOKEN is not defined"


def test_resolve_credentials_requires_valid_repo() -> None:
    assert isinstance(resolve_credentials(environ={"GITHUB_TOKEN": "t"}), Err)
    bad = resolve_credentials(environ={"GITHUB_TOKEN": "t"}, repo="no-slash")
    assert isinstance(bad, Err)
    assert "owner/name" in bad.error.message
