# tinystache/core/lexer.py
"""
Splits a template string into tokens.

The lexer walks the template left to right and, at each position, tries an
ordered table of (pattern, constructor) pairs. The first pattern that matches
at the current position wins; its match is consumed and turned into a token.
Anything that does not form a valid marker falls through to the literal
patterns, so tokenizing never fails and the `raw` text of the produced tokens
always concatenates back to the input.
"""
import re
from typing import Callable, List, Tuple

from .model import DEFAULT, IterEnd, IterInit, LiteralToken, SymbolToken, Token

_IDENT = r"([\w.-]+)"

TokenFactory = Callable[[re.Match, int], Token]

# order matters: first match wins
TOKEN_SPECS: List[Tuple[str, TokenFactory]] = [
    # {{ name }}
    (r"\{\{\s*" + _IDENT + r"\s*\}\}",
     lambda m, pos: SymbolToken(m.group(1), raw=m.group(0), position=pos)),
    # {{/ name }}
    (r"\{\{/\s*" + _IDENT + r"\s*\}\}",
     lambda m, pos: IterEnd(m.group(1), raw=m.group(0), position=pos)),
    # {{# name }}
    (r"\{\{#\s*" + _IDENT + r"\s*\}\}",
     lambda m, pos: IterInit(m.group(1), DEFAULT, raw=m.group(0), position=pos)),
    # {{# name 'separator' }}
    (r"\{\{#\s*" + _IDENT + r"\s+'([^']*)'\s*\}\}",
     lambda m, pos: IterInit(m.group(1), m.group(2), raw=m.group(0), position=pos)),
    # text up to the next opening delimiter
    (r"(?s).+?(?=\{\{)",
     lambda m, pos: LiteralToken(m.group(0), raw=m.group(0), position=pos)),
    # no opening delimiter left: the rest of the input
    (r"(?s).+",
     lambda m, pos: LiteralToken(m.group(0), raw=m.group(0), position=pos)),
]

_COMPILED_SPECS: List[Tuple[re.Pattern, TokenFactory]] = [
    (re.compile(pattern), factory) for pattern, factory in TOKEN_SPECS
]


def _append_token(tokens: List[Token], token: Token) -> None:
    # adjacent literal text collapses into a single literal token
    if isinstance(token, LiteralToken) and tokens and isinstance(tokens[-1], LiteralToken):
        previous = tokens[-1]
        tokens[-1] = LiteralToken(
            previous.text + token.text,
            raw=previous.raw + token.raw,
            position=previous.position,
        )
        return
    tokens.append(token)


def tokenize(template: str) -> List[Token]:
    """
    Breaks a template into tokens in document order.

    Args:
        template: The raw template text.

    Returns:
        List of tokens; empty for an empty template.
    """
    tokens: List[Token] = []
    position = 0

    while position < len(template):
        for pattern, factory in _COMPILED_SPECS:
            match = pattern.match(template, position)
            if match:
                _append_token(tokens, factory(match, position))
                position = match.end()
                break
        else:
            # the catch-all literal pattern matches any non-empty remainder
            raise AssertionError(f"no token pattern matched at position {position}")

    return tokens


def reconstruct(tokens: List[Token]) -> str:
    """Joins the source text of the tokens back into the template."""
    return "".join(token.raw for token in tokens)
