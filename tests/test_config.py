# tests/test_config.py
"""
Tests for config file discovery, profile layering and saving profiles.
"""
from pathlib import Path

import pytest
import toml

from tinystache.config.loader import load_and_merge_configs, resolve_effective_options, save_config_to_profile
from tinystache.config.settings import RenderConfig
from tinystache.core.parser import DEFAULT_MAX_DEPTH
from tinystache.exceptions import ConfigError

pytestmark = pytest.mark.usefixtures("no_user_config")


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    project = tmp_path / "project"
    project.mkdir()
    (project / ".tinystache.toml").write_text(
        """
template = "page.tmpl"
context = ["base.json"]
max_depth = 20

[vars]
site = "example"

[profiles.report]
template = "report.tmpl"
context = ["base.json", "report.toml"]
trailing_newline = true

[profiles.report.vars]
section = "q3"
"""
    )
    return project


def test_no_config_files(tmp_path: Path):
    assert load_and_merge_configs(tmp_path) == {}


def test_project_config_is_loaded(project_dir: Path):
    raw = load_and_merge_configs(project_dir)
    assert raw["template"] == "page.tmpl"
    assert "report" in raw["profiles"]


def test_pyproject_tool_table(tmp_path: Path):
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n\n[tool.tinystache]\ntemplate = "a.tmpl"\n')
    assert load_and_merge_configs(tmp_path) == {"template": "a.tmpl"}


def test_user_config_is_overridden_by_project(project_dir: Path, tmp_path: Path, monkeypatch):
    user_file = tmp_path / "user" / "config.toml"
    user_file.parent.mkdir()
    user_file.write_text('template = "user.tmpl"\ntrailing_newline = true\n\n[profiles.mine]\nmax_depth = 5\n')
    monkeypatch.setattr("tinystache.config.loader.USER_CONFIG_FILE", user_file)

    raw = load_and_merge_configs(project_dir)
    assert raw["template"] == "page.tmpl"
    assert raw["trailing_newline"] is True
    assert set(raw["profiles"]) == {"mine", "report"}


def test_defaults_without_any_configuration():
    config = resolve_effective_options({})
    assert config.template_path is None
    assert config.context_paths == []
    assert config.user_vars == {}
    assert config.max_depth == DEFAULT_MAX_DEPTH
    assert config.trailing_newline is False


def test_top_level_values_are_coerced(project_dir: Path):
    config = resolve_effective_options(load_and_merge_configs(project_dir))
    assert config.template_path == Path("page.tmpl")
    assert config.context_paths == [Path("base.json")]
    assert config.user_vars == {"site": "example"}
    assert config.max_depth == 20


def test_profile_overrides_top_level(project_dir: Path):
    config = resolve_effective_options(load_and_merge_configs(project_dir), "report")
    assert config.template_path == Path("report.tmpl")
    assert config.context_paths == [Path("base.json"), Path("report.toml")]
    assert config.trailing_newline is True
    assert config.max_depth == 20


def test_unknown_profile_falls_back_to_top_level(project_dir: Path):
    config = resolve_effective_options(load_and_merge_configs(project_dir), "nope")
    assert config.template_path == Path("page.tmpl")


def test_command_line_wins_and_vars_are_merged(project_dir: Path):
    config = resolve_effective_options(
        load_and_merge_configs(project_dir),
        "report",
        {"template_path": Path("cli.tmpl"), "user_vars": {"section": "q4", "extra": "1"}},
    )
    assert config.template_path == Path("cli.tmpl")
    assert config.user_vars == {"site": "example", "section": "q4", "extra": "1"}


def test_invalid_max_depth_in_config():
    with pytest.raises(ConfigError):
        resolve_effective_options({"max_depth": "deep"})


def test_vars_must_be_a_table():
    with pytest.raises(ConfigError):
        resolve_effective_options({"vars": ["a=1"]})


def test_trailing_newline_must_be_a_boolean():
    with pytest.raises(ConfigError):
        resolve_effective_options({"trailing_newline": "false"})


def test_profiles_must_be_a_table():
    with pytest.raises(ConfigError):
        resolve_effective_options({"profiles": "report"}, "report")


def test_save_named_profile(tmp_path: Path):
    config = RenderConfig(inline_template="Hi {{who}}", user_vars={"who": "there"}, max_depth=7)
    assert save_config_to_profile(config, "greet", project_dir=tmp_path) is True

    saved = toml.load(tmp_path / ".tinystache.toml")
    assert saved["profiles"]["greet"]["inline_template"] == "Hi {{who}}"
    assert saved["profiles"]["greet"]["vars"] == {"who": "there"}
    assert saved["profiles"]["greet"]["max_depth"] == 7
    assert "trailing_newline" not in saved["profiles"]["greet"]
    assert "context" not in saved["profiles"]["greet"]


def test_save_with_only_defaults_returns_false(tmp_path: Path):
    assert save_config_to_profile(RenderConfig(), "empty", project_dir=tmp_path) is False
    assert not (tmp_path / ".tinystache.toml").exists()


def test_save_default_profile_keeps_other_profiles(project_dir: Path):
    config = RenderConfig(template_path=Path("new.tmpl"))
    save_config_to_profile(config, "DEFAULT", project_dir=project_dir)

    saved = toml.load(project_dir / ".tinystache.toml")
    assert saved["template"] == "new.tmpl"
    assert "report" in saved["profiles"]


def test_saved_profile_round_trips(tmp_path: Path):
    original = RenderConfig(template_path=Path("t.tmpl"), context_paths=[Path("c.json")], trailing_newline=True)
    save_config_to_profile(original, "mine", project_dir=tmp_path)

    loaded = resolve_effective_options(load_and_merge_configs(tmp_path), "mine")
    assert loaded.template_path == Path("t.tmpl")
    assert loaded.context_paths == [Path("c.json")]
    assert loaded.trailing_newline is True
