import io
import json
from pathlib import Path

import pytest

from tinystache.core.context_loader import load_context, load_context_file, parse_user_vars
from tinystache.exceptions import ContextError


@pytest.fixture
def context_files(tmp_path: Path):
    base = tmp_path / "base.json"
    base.write_text(json.dumps({"title": "Base", "items": [1, 2]}))
    override = tmp_path / "override.toml"
    override.write_text('title = "Override"\n\n[owner]\nname = "Ann"\n')
    return base, override


def test_json_and_toml_are_merged_left_to_right(context_files):
    base, override = context_files
    context = load_context([base, override])
    assert context == {"title": "Override", "items": [1, 2], "owner": {"name": "Ann"}}


def test_user_vars_are_applied_last(context_files):
    base, _ = context_files
    context = load_context([base], {"title": "From CLI"})
    assert context["title"] == "From CLI"
    assert context["items"] == [1, 2]


def test_no_sources_gives_empty_context():
    assert load_context() == {}


def test_stdin_is_read_as_json():
    assert load_context_file(Path("-"), stdin=io.StringIO('{"a": [1]}')) == {"a": [1]}


def test_invalid_json_raises_context_error(tmp_path: Path):
    path = tmp_path / "bad.json"
    path.write_text("{not json")
    with pytest.raises(ContextError):
        load_context_file(path)


def test_invalid_toml_raises_context_error(tmp_path: Path):
    path = tmp_path / "bad.toml"
    path.write_text("key = = 1")
    with pytest.raises(ContextError):
        load_context_file(path)


def test_top_level_must_be_a_mapping(tmp_path: Path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]")
    with pytest.raises(ContextError, match="mapping"):
        load_context_file(path)


def test_missing_file_raises_context_error(tmp_path: Path):
    with pytest.raises(ContextError):
        load_context([tmp_path / "absent.json"])


def test_parse_user_vars():
    assert parse_user_vars(["a=1", "b = two", "c=x=y", "novalue"]) == {"a": "1", "b": " two", "c": "x=y"}
