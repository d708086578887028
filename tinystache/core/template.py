# tinystache/core/template.py
"""
Contains the Template class: a template compiled once and rendered against any
number of contexts.
"""
from pathlib import Path
from typing import Any, List, Optional, Tuple

import structlog

from tinystache.exceptions import TemplateError

from .evaluator import evaluate
from .lexer import tokenize
from .model import Node, Token
from .parser import DEFAULT_MAX_DEPTH, parse

log = structlog.get_logger(__name__)


def read_template_source(path: Path, encoding: str = "utf-8") -> str:
    # reads template text, reporting unreadable or undecodable files as TemplateError.
    log.info("loading_template_from_path", path=str(path))
    try:
        return Path(path).read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateError(f"Failed to read template file {path}: {e}") from e


class Template:
    """Holds the tokens and parse tree of one template source."""

    def __init__(self, source: str, name: str = "<string>", max_depth: Optional[int] = DEFAULT_MAX_DEPTH):
        self.source = source
        self.name = name
        self.max_depth = max_depth

        self.tokens: List[Token] = tokenize(source)
        try:
            self.nodes: Tuple[Node, ...] = parse(self.tokens, max_depth=max_depth)
        except TemplateError as e:
            log.error("template_compilation_failed", template=name, error=str(e))
            raise
        log.debug("template_compiled", template=name, tokens=len(self.tokens), nodes=len(self.nodes))

    @classmethod
    def from_file(cls, path: Path, encoding: str = "utf-8", max_depth: Optional[int] = DEFAULT_MAX_DEPTH) -> "Template":
        return cls(read_template_source(path, encoding), name=str(path), max_depth=max_depth)

    def render(self, context: Any) -> str:
        """Renders the compiled tree with the given context."""
        log.debug("rendering_template", template=self.name, context_type=type(context).__name__)
        return evaluate(self.nodes, context, max_depth=self.max_depth)

    def __repr__(self) -> str:
        return f"Template(name={self.name!r}, nodes={len(self.nodes)})"


def render(template: str, context: Any, max_depth: Optional[int] = DEFAULT_MAX_DEPTH) -> str:
    """Tokenizes, parses and evaluates `template` against `context` in one call."""
    return evaluate(parse(tokenize(template), max_depth=max_depth), context, max_depth=max_depth)
