"""Command parser for CLI input."""

import shlex

from cli.constants import FILE_TYPES
from cli.models import (
    CommandRequest,
    DeleteCommand,
    DownloadCommand,
    HealthCommand,
    InfoCommand,
    ListCommand,
    ServerCommand,
    UploadCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]
    args = tokens[1:]

    if command_name == "upload":
        return _parse_upload(args)
    elif command_name == "list":
        return _parse_list(args)
    elif command_name == "delete":
        return _parse_delete(args)
    elif command_name == "download":
        return _parse_download(args)
    elif command_name == "info":
        return _parse_no_args(args, "info", InfoCommand)
    elif command_name == "health":
        return _parse_no_args(args, "health", HealthCommand)
    elif command_name == "server":
        return _parse_server(args)
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <path> [path ...]' command."""
    if not args:
        raise ParseError("upload requires at least one file")

    return UploadCommand(file_list=tuple(args))


def _parse_list(args: list[str]) -> ListCommand:
    """Parse 'list [type] [--page N] [--limit N]' command."""
    file_type = None
    options = {"--page": 1, "--limit": 100}

    i = 0
    while i < len(args):
        arg = args[i]
        if arg in options:
            if i + 1 >= len(args):
                raise ParseError(f"{arg} requires a value")
            options[arg] = _positive_int(arg, args[i + 1])
            i += 2
            continue
        if arg.startswith("--"):
            raise ParseError(f"Unknown option: {arg}")
        if file_type is not None:
            raise ParseError("list accepts a single type")
        if arg not in FILE_TYPES:
            raise ParseError(f"Unknown type: {arg}. Valid types: {', '.join(FILE_TYPES)}")
        file_type = arg
        i += 1

    return ListCommand(file_type=file_type, page=options["--page"], limit=options["--limit"])


def _positive_int(option: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ParseError(f"{option} must be an integer, got '{raw}'")
    if value < 1:
        raise ParseError(f"{option} must be 1 or greater")
    return value


def _parse_delete(args: list[str]) -> DeleteCommand:
    """Parse 'delete <name> [name ...]' command."""
    if not args:
        raise ParseError("delete requires at least one filename")

    return DeleteCommand(filenames=tuple(args))


def _parse_download(args: list[str]) -> DownloadCommand:
    """Parse 'download <name> [output_path]' command."""
    if len(args) < 1 or len(args) > 2:
        raise ParseError("download requires 1 or 2 arguments: <name> [output_path]")

    filename = args[0]
    output_path = args[1] if len(args) > 1 else None

    return DownloadCommand(filename=filename, output_path=output_path)


def _parse_server(args: list[str]) -> ServerCommand:
    """Parse 'server <host> <port>' command."""
    if len(args) != 2:
        raise ParseError("server requires exactly 2 arguments: <host> <port>")

    host, raw_port = args
    return ServerCommand(host=host, port=_positive_int("port", raw_port))


def _parse_no_args(args: list[str], name: str, command_cls):
    if args:
        raise ParseError(f"{name} takes no arguments")
    return command_cls()
