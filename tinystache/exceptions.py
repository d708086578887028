# tinystache/exceptions.py
from typing import Optional


class TinystacheError(Exception):
    # base exception for all application-specific errors.
    pass


class ConfigError(TinystacheError):
    # errors related to configuration files and profiles.
    pass


class ContextError(TinystacheError):
    # errors while reading or decoding a render context.
    pass


class OutputError(TinystacheError):
    # errors during output operations.
    pass


class TemplateError(TinystacheError):
    # errors related to loading, parsing or rendering a template.
    pass


class TemplateSyntaxError(TemplateError):
    """A structural problem found while building the parse tree."""

    def __init__(self, message: str, position: Optional[int] = None):
        self.message = message
        self.position = position
        if position is None:
            super().__init__(message)
        else:
            super().__init__(f"{message} (at position {position})")


class UnmatchedIterEnd(TemplateSyntaxError):
    """A `{{/name}}` marker with no open `{{#name}}` at the same depth."""

    def __init__(self, name: str, position: Optional[int] = None, open_name: Optional[str] = None):
        self.name = name
        self.open_name = open_name
        if open_name is None:
            message = f"closing marker '{{{{/{name}}}}}' has no matching opening marker"
        else:
            message = f"closing marker '{{{{/{name}}}}}' does not match open iteration '{open_name}'"
        super().__init__(message, position)


class UnterminatedIterInit(TemplateSyntaxError):
    """A `{{#name}}` marker that is never closed before the template ends."""

    def __init__(self, name: str, position: Optional[int] = None):
        self.name = name
        super().__init__(f"iteration '{name}' is never closed with '{{{{/{name}}}}}'", position)


class NestingTooDeep(TemplateError):
    """Iteration nesting exceeded the configured depth guard."""

    def __init__(self, max_depth: int, position: Optional[int] = None):
        self.max_depth = max_depth
        self.position = position
        message = f"iteration nesting deeper than {max_depth} levels"
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)
