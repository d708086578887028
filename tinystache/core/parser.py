# tinystache/core/parser.py
"""
Builds the parse tree from a flat token sequence.

Literal and symbol tokens become nodes of the same shape. Iteration markers are
matched with an explicit stack of open frames instead of recursion, so a deeply
nested template is limited only by the `max_depth` guard and never by the
interpreter's recursion limit.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from tinystache.exceptions import NestingTooDeep, UnmatchedIterEnd, UnterminatedIterInit

from .lexer import tokenize
from .model import Iter, IterEnd, IterInit, Literal, LiteralToken, Node, Symbol, SymbolToken, Token

DEFAULT_MAX_DEPTH = 100


@dataclass
class _OpenIteration:
    init: IterInit
    # node list the finished Iter node is appended to
    parent: List[Node]
    children: List[Node] = field(default_factory=list)


def parse(source: Union[str, Sequence[Token]], max_depth: Optional[int] = DEFAULT_MAX_DEPTH) -> Tuple[Node, ...]:
    """
    Parses a template (or already lexed tokens) into a tuple of top-level nodes.

    Args:
        source: Template text, or the token list produced by `tokenize`.
        max_depth: Maximum iteration nesting; None disables the guard.

    Returns:
        The top-level nodes in document order.

    Raises:
        UnmatchedIterEnd: A closing marker has no open iteration of the same name.
        UnterminatedIterInit: An opening marker is never closed.
        NestingTooDeep: Nesting exceeds `max_depth`.
    """
    tokens = tokenize(source) if isinstance(source, str) else source

    root: List[Node] = []
    current = root
    stack: List[_OpenIteration] = []

    for token in tokens:
        if isinstance(token, LiteralToken):
            current.append(Literal(token.text))
        elif isinstance(token, SymbolToken):
            current.append(Symbol(token.name))
        elif isinstance(token, IterInit):
            if max_depth is not None and len(stack) >= max_depth:
                raise NestingTooDeep(max_depth, token.position)
            frame = _OpenIteration(init=token, parent=current)
            stack.append(frame)
            current = frame.children
        elif isinstance(token, IterEnd):
            if not stack:
                raise UnmatchedIterEnd(token.name, token.position)
            frame = stack[-1]
            if frame.init.name != token.name:
                raise UnmatchedIterEnd(token.name, token.position, open_name=frame.init.name)
            stack.pop()
            current = frame.parent
            current.append(Iter(frame.init.name, frame.init.separator, tuple(frame.children)))
        else:
            raise TypeError(f"unexpected token type: {type(token).__name__}")

    if stack:
        unclosed = stack[-1].init
        raise UnterminatedIterInit(unclosed.name, unclosed.position)

    return tuple(root)
