# tinystache/cli/console_output.py
"""
Handles printing token tables, parse trees and render summaries to the console.
"""
from typing import List, Optional, Sequence

import click
import structlog
from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from tinystache.core.model import (
    DEFAULT,
    Iter,
    IterEnd,
    IterInit,
    Literal,
    LiteralToken,
    Node,
    Separator,
    Symbol,
    SymbolToken,
    Token,
)
from tinystache.core.template import Template

log = structlog.get_logger(__name__)


def _describe_separator(separator: Separator) -> str:
    return "default (',')" if separator is DEFAULT else repr(separator)


def _token_row(token: Token) -> List[str]:
    if isinstance(token, LiteralToken):
        return ["literal", repr(token.text), ""]
    if isinstance(token, SymbolToken):
        return ["symbol", token.name, ""]
    if isinstance(token, IterInit):
        return ["iter-init", token.name, _describe_separator(token.separator)]
    if isinstance(token, IterEnd):
        return ["iter-end", token.name, ""]
    raise TypeError(f"unexpected token type: {type(token).__name__}")


def print_token_table(tokens: Sequence[Token], console: Optional[Console] = None, title: str = "Tokens"):
    console = console or Console()
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Kind")
    table.add_column("Value")
    table.add_column("Separator")
    table.add_column("Position", justify="right")
    for index, token in enumerate(tokens):
        kind, value, separator = _token_row(token)
        # Text cells keep template braces from being read as rich markup
        table.add_row(str(index), kind, Text(value), Text(separator), str(token.position))
    console.print(table)


def _add_nodes(branch: Tree, nodes: Sequence[Node]):
    for node in nodes:
        if isinstance(node, Literal):
            branch.add(Text(f"literal {node.text!r}"))
        elif isinstance(node, Symbol):
            branch.add(Text(f"symbol {node.name}"))
        elif isinstance(node, Iter):
            child = branch.add(Text(f"iter {node.name} sep={_describe_separator(node.separator)}"))
            _add_nodes(child, node.children)
        else:
            raise TypeError(f"unexpected node type: {type(node).__name__}")


def build_parse_tree(template: Template) -> Tree:
    root = Tree(Text(template.name))
    _add_nodes(root, template.nodes)
    return root


def print_parse_tree(template: Template, console: Optional[Console] = None):
    console = console or Console()
    console.print(build_parse_tree(template))


def print_render_summary(template: Template, context_keys: Sequence[str], rendered: str):
    """Prints token/node counts and output size to stderr."""
    log.debug("console_summary_output_requested")
    click.secho("--- Render Summary ---", fg="cyan", err=True)
    click.echo(f"Template: {template.name}", err=True)
    click.echo(f"Tokens: {len(template.tokens)}  Top-level nodes: {len(template.nodes)}", err=True)
    click.echo(f"Context keys: {', '.join(context_keys) if context_keys else '(none)'}", err=True)
    click.echo(f"Output characters: {len(rendered):,}", err=True)
