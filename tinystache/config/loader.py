# tinystache/config/loader.py
"""
Handles loading, merging, and saving of configurations from/to TOML files.
"""
import toml
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import asdict, fields as dataclass_fields, MISSING
import structlog

from tinystache.exceptions import ConfigError

from .settings import RenderConfig

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".tinystache.toml", "tinystache.toml", "pyproject.toml"]
USER_CONFIG_DIR = Path.home() / ".config" / "tinystache"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"

CONFIG_KEY_TO_RENDERCONFIG_ATTR_MAP: Dict[str, str] = {
    "template": "template_path",
    "inline_template": "inline_template",
    "context": "context_paths",
    "vars": "user_vars",
    "output_file": "output_file",
    "max_depth": "max_depth",
    "trailing_newline": "trailing_newline",
}

_PATH_LIST_ATTRS = ("context_paths",)
_PATH_ATTRS = ("template_path", "output_file")
_NEVER_SAVE = {"save_profile_name"}


def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file(): return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (OSError, toml.TomlDecodeError) as e:
        log.error("config_file_load_error", path=str(file_path), error=str(e))
        return {}
    return data.get("tool", {}).get("tinystache", {}) if file_path.name == "pyproject.toml" else data


def load_and_merge_configs(project_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Reads the user config, then the first project config found; project settings win."""
    project_dir = project_dir or Path.cwd()
    merged_toml_data: Dict[str, Any] = {}
    if USER_CONFIG_FILE.is_file():
        log.info("loading_user_global_config", path=str(USER_CONFIG_FILE))
        merged_toml_data.update(_load_toml_file_data(USER_CONFIG_FILE))

    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = project_dir / filename
        if not candidate.is_file():
            continue
        project_settings = _load_toml_file_data(candidate)
        if not project_settings:
            continue
        log.info("loading_project_local_config", path=str(candidate))
        user_profiles = merged_toml_data.get("profiles", {})
        project_profiles = project_settings.pop("profiles", {})
        if project_profiles and isinstance(user_profiles, dict) and isinstance(project_profiles, dict):
            user_profiles.update(project_profiles)
            merged_toml_data["profiles"] = user_profiles
        elif isinstance(project_profiles, dict) and project_profiles:
            merged_toml_data["profiles"] = project_profiles
        merged_toml_data.update(project_settings)
        break
    if not merged_toml_data: log.debug("no_configuration_files_loaded")
    return merged_toml_data


def _field_default(name: str) -> Any:
    field_def = next(f for f in dataclass_fields(RenderConfig) if f.name == name)
    return field_def.default_factory() if field_def.default_factory is not MISSING else field_def.default


def _coerce_option(attr: str, value: Any) -> Any:
    # values from toml arrive as plain strings, lists and tables.
    if attr in _PATH_LIST_ATTRS:
        if isinstance(value, (str, Path)): value = [value]
        return [Path(p) for p in value]
    if attr in _PATH_ATTRS:
        return Path(value) if value else None
    if attr == "user_vars":
        if not isinstance(value, dict):
            raise ConfigError(f"'vars' must be a table of KEY = VALUE pairs, got {type(value).__name__}")
        return {str(k): v for k, v in value.items()}
    if attr == "trailing_newline":
        if not isinstance(value, bool):
            raise ConfigError(f"'trailing_newline' must be true or false, got {value!r}")
        return value
    if attr == "max_depth":
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"'max_depth' must be an integer, got {value!r}") from e
    return value


def _apply_table(effective_options: Dict[str, Any], table: Dict[str, Any]) -> None:
    for toml_key, attr in CONFIG_KEY_TO_RENDERCONFIG_ATTR_MAP.items():
        if toml_key in table:
            effective_options[attr] = _coerce_option(attr, table[toml_key])


def resolve_effective_options(
    raw_configs: Dict[str, Any],
    profile_name: Optional[str] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> RenderConfig:
    """
    Layers dataclass defaults, top-level config values, the named profile and
    command line values (in that order) into a RenderConfig.
    """
    effective_options: Dict[str, Any] = {
        f.name: _field_default(f.name) for f in dataclass_fields(RenderConfig) if f.init
    }
    _apply_table(effective_options, raw_configs)

    if profile_name:
        profiles = raw_configs.get("profiles", {})
        if not isinstance(profiles, dict):
            raise ConfigError(f"'profiles' must be a table of named profiles, got {type(profiles).__name__}")
        profile_values = profiles.get(profile_name)
        if profile_values:
            log.info("applying_profile_settings", profile=profile_name)
            _apply_table(effective_options, profile_values)
        else:
            log.warning("profile_not_found_in_config_files", profile_name=profile_name)

    for attr, value in (cli_overrides or {}).items():
        if attr == "user_vars":
            # command line vars add to configured ones rather than replacing them
            effective_options["user_vars"] = {**effective_options["user_vars"], **value}
        else:
            effective_options[attr] = value

    return RenderConfig(**effective_options)


def save_config_to_profile(config_to_save: RenderConfig, profile_name: str, project_dir: Optional[Path] = None) -> bool:
    project_dir = project_dir or Path.cwd()
    target_toml_path = project_dir / ".tinystache.toml"
    if not target_toml_path.exists():
        alt_path = project_dir / "tinystache.toml"
        if alt_path.exists(): target_toml_path = alt_path
    log.info("attempting_to_save_profile", profile=profile_name, path=str(target_toml_path))

    profile_data: Dict[str, Any] = {}
    for attr, value in asdict(config_to_save).items():
        if attr in _NEVER_SAVE: continue
        toml_key = next((k for k, v in CONFIG_KEY_TO_RENDERCONFIG_ATTR_MAP.items() if v == attr), None)
        if not toml_key: continue
        if value == _field_default(attr): continue

        if isinstance(value, Path): profile_data[toml_key] = str(value)
        elif isinstance(value, list): profile_data[toml_key] = [str(i) for i in value]
        elif value is not None: profile_data[toml_key] = value

    if not profile_data:
        log.info("no_options_to_save_for_profile", profile=profile_name)
        return False

    existing_data: Dict[str, Any] = {}
    if target_toml_path.exists():
        try: existing_data = toml.load(target_toml_path)
        except toml.TomlDecodeError as e:
            raise ConfigError(f"Could not read existing TOML {target_toml_path} to save profile: {e}") from e

    if profile_name.upper() == "DEFAULT":
        profiles_bak = existing_data.pop("profiles", None)
        existing_data.update(profile_data)
        if profiles_bak is not None: existing_data["profiles"] = profiles_bak
    else:
        existing_data.setdefault("profiles", {})[profile_name] = profile_data

    try:
        with target_toml_path.open("w", encoding="utf-8") as f: toml.dump(existing_data, f)
    except OSError as e:
        raise ConfigError(f"Error writing profile '{profile_name}' to {target_toml_path}: {e}") from e
    log.info("profile_saved_successfully", profile=profile_name, path=str(target_toml_path))
    return True
