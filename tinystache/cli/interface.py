# tinystache/cli/interface.py
import sys
from functools import wraps
from pathlib import Path
from typing import Any, Dict, Optional

import click
from click_option_group import optgroup
import structlog

from tinystache import __version__ as app_version
from tinystache.config.settings import RenderConfig, DEFAULT_TRAILING_NEWLINE
from tinystache.config.loader import load_and_merge_configs, resolve_effective_options, save_config_to_profile
from tinystache.core.context_loader import load_context, parse_user_vars
from tinystache.core.lexer import tokenize
from tinystache.core.output import write_to_file, write_to_stdout
from tinystache.core.parser import DEFAULT_MAX_DEPTH
from tinystache.core.template import Template, read_template_source
from tinystache.exceptions import TinystacheError
from tinystache.logging_setup import configure_logging

from .console_output import print_parse_tree, print_render_summary, print_token_table

log = structlog.get_logger(__name__)

# render options that map straight onto RenderConfig fields
_RENDER_CONFIG_PARAMS = (
    "template_path", "inline_template", "context_paths", "user_vars",
    "output_file", "max_depth", "trailing_newline", "save_profile_name",
)


def _load_template(config: RenderConfig) -> Template:
    if config.inline_template is not None:
        return Template(config.inline_template, name="inline", max_depth=config.max_depth)
    if config.template_path:
        return Template.from_file(config.template_path, max_depth=config.max_depth)
    raise click.UsageError("No template given: pass TEMPLATE_FILE, use --inline, or set 'template' in a config file.")


def _run_render_flow(config: RenderConfig, show_summary: bool = False):
    log.info("render_flow_started", template=config.template_source_name)
    template = _load_template(config)
    context = load_context(config.context_paths, config.user_vars, stdin=click.get_text_stream("stdin"))

    rendered = template.render(context)
    if config.trailing_newline and not rendered.endswith("\n"):
        rendered += "\n"
    log.info("render_flow_complete", output_chars=len(rendered))

    if config.output_file:
        write_to_file(config.output_file, rendered)
        click.echo(f"Info: Output written to: {config.output_file}", err=True)
    else:
        write_to_stdout(rendered)

    if show_summary:
        print_render_summary(template, list(context.keys()), rendered)


def _handle_errors(func):
    # shared error reporting for every subcommand.
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.exceptions.Exit: raise
        except TinystacheError as e:
            log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
            click.secho(f"Error: {e}", fg="red", err=True)
            sys.exit(1)
        except click.ClickException as e:
            log.error("click_exception_in_cli", error_type=type(e).__name__, message=str(e))
            e.show(); sys.exit(e.exit_code)
    return wrapper


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@click.option("--force-json-logs", "force_json_logs_cli", is_flag=True, default=False, help="Force JSON logs.")
@click.option("--config-profile", "active_config_profile_name", default=None, help="Load a profile from config file(s).")
@click.version_option(version=app_version, prog_name="tinystache", help="Show version and exit.")
@click.pass_context
def main_cli_group(ctx: click.Context, verbosity_level: int, force_json_logs_cli: bool, active_config_profile_name: Optional[str]):
    """tinystache: render Mustache-style templates with
    {{symbols}} and {{#iterations 'separator'}}...{{/iterations}}."""
    log_level = "warning"
    if verbosity_level == 1: log_level = "info"
    elif verbosity_level >= 2: log_level = "debug"
    configure_logging(log_level_str=log_level, force_json_logs=force_json_logs_cli)

    ctx.ensure_object(dict)
    ctx.obj["active_config_profile_name"] = active_config_profile_name
    log.debug("cli_group_invoked", profile=active_config_profile_name, subcommand=ctx.invoked_subcommand)


@main_cli_group.command("render")
@click.argument("template_path", required=False, type=click.Path(exists=True, dir_okay=False, readable=True, path_type=Path))
@optgroup.group("Template Source", help="Where the template text comes from.")
@optgroup.option("-e", "--inline", "inline_template", default=None, metavar="TEXT", help="Render TEXT as the template instead of a file.")
@optgroup.group("Context", help="Data the template is rendered against.")
@optgroup.option("-c", "--context", "context_paths", multiple=True, type=click.Path(dir_okay=False, path_type=Path), help="JSON or TOML context file; '-' reads JSON from stdin. Repeatable, later files win.")
@optgroup.option("--var", "user_vars", multiple=True, metavar="KEY=VALUE", help="Top-level context value, applied after context files.")
@optgroup.group("Output", help="Where and how the result is written.")
@optgroup.option("-o", "--output", "output_file", type=click.Path(dir_okay=False, writable=True, path_type=Path), default=None, help="Path to write the output to.")
@optgroup.option("--trailing-newline/--no-trailing-newline", "trailing_newline", default=DEFAULT_TRAILING_NEWLINE, help="Ensure the output ends with a newline.")
@optgroup.option("--console-summary/--no-console-summary", "show_summary", default=False, help="Print token/node counts to stderr.")
@optgroup.group("Limits & Profiles", help="Safety limits and saved option sets.")
@optgroup.option("--max-depth", "max_depth", type=click.IntRange(min=1), default=DEFAULT_MAX_DEPTH, show_default=True, help="Maximum iteration nesting depth.")
@optgroup.option("--save", "save_profile_name", type=str, metavar="PROFILE_NAME", default=None, help="Save options to a profile in .tinystache.toml and exit.")
@click.pass_context
@_handle_errors
def render_command(ctx: click.Context, show_summary: bool, **cli_params: Any):
    """Render TEMPLATE_FILE (or --inline text) with the given context."""
    cli_overrides: Dict[str, Any] = {}
    for name in _RENDER_CONFIG_PARAMS:
        if ctx.get_parameter_source(name) != click.core.ParameterSource.COMMANDLINE:
            continue
        value = cli_params[name]
        if name == "user_vars": value = parse_user_vars(value)
        elif name == "context_paths": value = list(value)
        cli_overrides[name] = value

    raw_configs = load_and_merge_configs()
    config = resolve_effective_options(raw_configs, ctx.obj.get("active_config_profile_name"), cli_overrides)
    log.debug("effective_render_config", config=config)

    if config.save_profile_name:
        if save_config_to_profile(config, config.save_profile_name):
            click.echo(f"Info: Saved profile '{config.save_profile_name}'.", err=True)
        else:
            click.echo(f"Info: Nothing to save for profile '{config.save_profile_name}'.", err=True)
        ctx.exit(0)

    _run_render_flow(config, show_summary=show_summary)


@main_cli_group.command("tokens")
@click.argument("template_path", type=click.Path(exists=True, dir_okay=False, readable=True, path_type=Path))
@_handle_errors
def tokens_command(template_path: Path):
    """Show the tokens the lexer produces for TEMPLATE_FILE."""
    print_token_table(tokenize(read_template_source(template_path)), title=str(template_path))


@main_cli_group.command("tree")
@click.argument("template_path", type=click.Path(exists=True, dir_okay=False, readable=True, path_type=Path))
@click.option("--max-depth", "max_depth", type=click.IntRange(min=1), default=DEFAULT_MAX_DEPTH, show_default=True, help="Maximum iteration nesting depth.")
@_handle_errors
def tree_command(template_path: Path, max_depth: int):
    """Show the parse tree of TEMPLATE_FILE."""
    print_parse_tree(Template.from_file(template_path, max_depth=max_depth))
