# tinystache/__init__.py
"""A small Mustache-style template engine: tokenize, parse, evaluate."""

__version__ = "0.1.0"

from tinystache.core import DEFAULT_MAX_DEPTH, Template, evaluate, parse, render, tokenize
from tinystache.core.model import (
    DEFAULT,
    Iter,
    IterEnd,
    IterInit,
    Literal,
    LiteralToken,
    Symbol,
    SymbolToken,
)
from tinystache.exceptions import (
    NestingTooDeep,
    TemplateError,
    TemplateSyntaxError,
    TinystacheError,
    UnmatchedIterEnd,
    UnterminatedIterInit,
)

__all__ = [
    "__version__",
    "tokenize",
    "parse",
    "evaluate",
    "render",
    "Template",
    "DEFAULT_MAX_DEPTH",
    "DEFAULT",
    "LiteralToken",
    "SymbolToken",
    "IterInit",
    "IterEnd",
    "Literal",
    "Symbol",
    "Iter",
    "TinystacheError",
    "TemplateError",
    "TemplateSyntaxError",
    "UnmatchedIterEnd",
    "UnterminatedIterInit",
    "NestingTooDeep",
]
