# tinystache/core/model.py
"""
Immutable value types shared by the lexer, parser and evaluator.

Tokens are the flat output of the lexer. Nodes form the parse tree: a parsed
template is a tuple of top-level nodes, and `Iter.children` holds the nested
nodes of an iteration body.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple, Union


class DefaultMarker(Enum):
    """Separator sentinel for `{{#name}}` markers without a quoted argument."""

    DEFAULT = "default"

    def __repr__(self) -> str:
        return "DEFAULT"


DEFAULT = DefaultMarker.DEFAULT
DEFAULT_SEPARATOR_TEXT = ","

# the name a symbol uses to refer to the current iteration item
CURRENT_ITEM = "."

Separator = Union[str, DefaultMarker]


def resolve_separator(separator: Separator) -> str:
    if separator is DEFAULT:
        return DEFAULT_SEPARATOR_TEXT
    return separator


# --- tokens ---
# `raw` and `position` locate the token in its source template and are left
# out of equality, so hand-built tokens compare equal to lexed ones.

@dataclass(frozen=True)
class LiteralToken:
    text: str
    raw: str = field(default="", compare=False, repr=False)
    position: int = field(default=0, compare=False, repr=False)


@dataclass(frozen=True)
class SymbolToken:
    name: str
    raw: str = field(default="", compare=False, repr=False)
    position: int = field(default=0, compare=False, repr=False)


@dataclass(frozen=True)
class IterInit:
    name: str
    separator: Separator = DEFAULT
    raw: str = field(default="", compare=False, repr=False)
    position: int = field(default=0, compare=False, repr=False)


@dataclass(frozen=True)
class IterEnd:
    name: str
    raw: str = field(default="", compare=False, repr=False)
    position: int = field(default=0, compare=False, repr=False)


Token = Union[LiteralToken, SymbolToken, IterInit, IterEnd]


# --- nodes ---

@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Symbol:
    name: str


@dataclass(frozen=True)
class Iter:
    name: str
    separator: Separator = DEFAULT
    children: Tuple["Node", ...] = ()

    def __post_init__(self):
        # accept any sequence of children but store it as a tuple
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))


Node = Union[Literal, Symbol, Iter]
