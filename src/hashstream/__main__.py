"""
hashstream Package Main Entry Point

This module serves as the main entry point when the package is run as a module
using `python -m hashstream`. It delegates to the Typer application.
"""

import sys

from hashstream.cli.common.error_handler import handle_cli_error
from hashstream.cli.typer_app import app


def main() -> None:
    try:
        app(prog_name="hashstream")
    except KeyboardInterrupt as e:
        # Interrupted outside a command (commands map it themselves)
        sys.exit(handle_cli_error(e, "hashstream-main"))


if __name__ == "__main__":
    main()
