# tinystache/main.py
"""Main entry point for the tinystache CLI application."""

from tinystache.cli.interface import main_cli_group


def entrypoint():
    """Function to be called by the script defined in pyproject.toml."""
    main_cli_group(prog_name="tinystache")

if __name__ == '__main__':
    entrypoint()
