from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import structlog

from tinystache.core.parser import DEFAULT_MAX_DEPTH

log = structlog.get_logger(__name__)

DEFAULT_TRAILING_NEWLINE = False

@dataclass
class RenderConfig:
    # holds all configuration parameters for a single render run.
    template_path: Optional[Path] = None
    inline_template: Optional[str] = None
    context_paths: List[Path] = field(default_factory=list)
    user_vars: Dict[str, str] = field(default_factory=dict)
    output_file: Optional[Path] = None
    max_depth: int = DEFAULT_MAX_DEPTH
    trailing_newline: bool = DEFAULT_TRAILING_NEWLINE
    save_profile_name: Optional[str] = None

    def __post_init__(self):
        if self.max_depth < 1:
            log.warning("invalid_max_depth_using_default", requested=self.max_depth, default=DEFAULT_MAX_DEPTH)
            self.max_depth = DEFAULT_MAX_DEPTH

    @property
    def template_source_name(self) -> str:
        if self.inline_template is not None:
            return "inline"
        if self.template_path:
            return str(self.template_path)
        return "<none>"
