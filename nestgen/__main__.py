# File: nestgen/__main__.py
"""
nestgen - Module entry point.

Allows running the generator directly via::

    python -m nestgen --model shop.yaml --output ./server

This module simply delegates to the CLI entry point defined in ``nestgen.cli``.
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from nestgen.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
