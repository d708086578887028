# tinystache/core/evaluator.py
"""
Renders a parse tree against a context value.

Lookups are forgiving: a missing key, or a lookup on a context that is not a
mapping, renders as an empty string for symbols and as an empty sequence for
iterations. Neither the tree nor the context is modified.
"""
from collections.abc import Mapping, Sequence
from typing import Any, Iterable, Optional

from tinystache.exceptions import NestingTooDeep

from .model import CURRENT_ITEM, Iter, Literal, Node, Symbol, resolve_separator
from .parser import DEFAULT_MAX_DEPTH


class _Missing:
    def __repr__(self) -> str:
        return "<missing>"


_MISSING = _Missing()


def _lookup(context: Any, name: str) -> Any:
    if isinstance(context, Mapping):
        return context.get(name, _MISSING)
    return _MISSING


def _to_text(value: Any) -> str:
    if value is None or value is _MISSING:
        return ""
    return str(value)


def _as_items(value: Any) -> Sequence:
    # strings are sequences too, but iterate as nothing here
    if isinstance(value, (str, bytes, bytearray)) or not isinstance(value, Sequence):
        return ()
    return value


def evaluate(nodes: Iterable[Node], context: Any, max_depth: Optional[int] = DEFAULT_MAX_DEPTH) -> str:
    """
    Evaluates nodes in order against `context` and concatenates the results.

    Args:
        nodes: Parse tree nodes, as returned by `parse`.
        context: Scalar, mapping or sequence the template is rendered against.
        max_depth: Maximum iteration nesting; None disables the guard.

    Raises:
        NestingTooDeep: The tree nests iterations deeper than `max_depth`.
    """
    return _evaluate_nodes(nodes, context, 0, max_depth)


def _evaluate_nodes(nodes: Iterable[Node], context: Any, depth: int, max_depth: Optional[int]) -> str:
    return "".join(_evaluate_node(node, context, depth, max_depth) for node in nodes)


def _evaluate_node(node: Node, context: Any, depth: int, max_depth: Optional[int]) -> str:
    if isinstance(node, Literal):
        return node.text

    if isinstance(node, Symbol):
        if node.name == CURRENT_ITEM:
            return _to_text(context)
        return _to_text(_lookup(context, node.name))

    if isinstance(node, Iter):
        if max_depth is not None and depth >= max_depth:
            raise NestingTooDeep(max_depth)
        items = _as_items(_lookup(context, node.name))
        separator = resolve_separator(node.separator)
        return separator.join(
            _evaluate_nodes(node.children, item, depth + 1, max_depth) for item in items
        )

    raise TypeError(f"unexpected node type: {type(node).__name__}")
