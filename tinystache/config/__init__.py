from .settings import RenderConfig
from .loader import load_and_merge_configs, save_config_to_profile, resolve_effective_options

__all__ = ["RenderConfig", "load_and_merge_configs", "save_config_to_profile", "resolve_effective_options"]
