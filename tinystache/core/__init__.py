# tinystache/core/__init__.py
"""
Template engine core for tinystache.

Provides the three pipeline stages (tokenize, parse, evaluate), the one-call
render helper, and the Template class for parsing once and rendering many times.
"""
from .lexer import tokenize
from .parser import parse, DEFAULT_MAX_DEPTH
from .evaluator import evaluate
from .template import Template, render

__all__ = [
    "tokenize",
    "parse",
    "evaluate",
    "render",
    "Template",
    "DEFAULT_MAX_DEPTH",
]
