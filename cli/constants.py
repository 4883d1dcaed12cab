"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["upload", "list", "delete", "download", "info", "health", "server", "clear", "exit", "help"]

FILE_TYPES = (
    "image", "video", "audio", "document", "archive",
    "executable", "code", "font", "database", "other",
)

STYLE = Style.from_dict(
    {
        "prompt": "#2E9AFE bold",
        "command": "#0088ff bold",
    }
)

BLUE = "\033[38;2;46;154;254m"
GREEN = "\033[32m"
RESET = "\033[0m"

LOGO = f"""{BLUE}
  __ _ _          _
 / _(_) | ___  __| |_ __ ___  _ __
| |_| | |/ _ \\/ _` | '__/ _ \\| '_ \\
|  _| | |  __/ (_| | | | (_) | |_) |
|_| |_|_|\\___|\\__,_|_|  \\___/| .__/
                             |_|
{RESET}"""

WELCOME_TITLE = "Filedrop CLI - Personal File Server"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "filedrop> "

HELP_TEXT = f"""Available commands:
  upload <path> [path ...]                    Upload up to 50 local files in one request
  list [type] [--page N] [--limit N]          List stored files, newest first
  delete <name> [name ...]                    Delete stored files (several names = batch delete)
  download <name> [output_path]               Download a stored file
  info                                        Show storage statistics
  health                                      Check that the server is up
  server <host> <port>                        Point the CLI at another server
  clear                                       Clear screen and redisplay welcome message
  help                                        Show this help
  exit                                        Exit REPL

Types: {', '.join(FILE_TYPES)}
Examples:
  upload photo.png notes.txt
  list image --page 2 --limit 20
  delete 1718000000000-a1b2c3d4e5f6a-photo.png
  download 1718000000000-a1b2c3d4e5f6a-photo.png downloads/"""
