"""CLI entry point.

Without arguments the interactive REPL starts. Any other arguments are run
as a single command, e.g. ``filedrop list image --page 2``.
"""

import os
import shlex
import sys
from typing import List, Optional

from common.logging_config import setup_logging
from cli.parser import ParseError, parse_command
from cli.repl import dispatch_command, repl_loop


def run_once(argv: List[str]) -> int:
    """
    Parse and execute one command given on the command line.

    Returns:
        Process exit code: 0 on success, 1 on errors, 2 on bad syntax
    """
    try:
        cmd_obj = parse_command(shlex.join(argv))
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    result = dispatch_command(cmd_obj)
    print(result)
    return 1 if result.startswith(("Error", "Upload failed")) else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for CLI."""
    if argv is None:
        argv = sys.argv[1:]

    debug = '--debug' in argv
    argv = [arg for arg in argv if arg != '--debug']

    log_level = 'DEBUG' if debug else os.getenv('LOG_LEVEL', 'WARNING')
    logger = setup_logging('cli', log_level=log_level)
    logger.debug("Debug logging enabled")

    if argv:
        return run_once(argv)

    logger.info("CLI starting...")
    try:
        repl_loop()
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise
    finally:
        logger.info("CLI exiting")
    return 0


if __name__ == "__main__":
    sys.exit(main())
