"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["token", "upload", "list", "delete", "discard", "url", "clear", "exit", "help"]

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
 ███████╗██╗██╗     ███████╗██████╗ ██████╗  ██████╗ ██████╗
 ██╔════╝██║██║     ██╔════╝██╔══██╗██╔══██╗██╔═══██╗██╔══██╗
 █████╗  ██║██║     █████╗  ██║  ██║██████╔╝██║   ██║██████╔╝
 ██╔══╝  ██║██║     ██╔══╝  ██║  ██║██╔══██╗██║   ██║██╔═══╝
 ██║     ██║███████╗███████╗██████╔╝██║  ██║╚██████╔╝██║
 ╚═╝     ╚═╝╚══════╝╚══════╝╚═════╝ ╚═╝  ╚═╝ ╚═════╝ ╚═╝
{RESET}"""

WELCOME_TITLE = "FileDrop CLI - upload, list and delete stored files"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "filedrop> "

HELP_TEXT = """Available commands:
  token <value>                       Save the management token
  upload <path> [<path> ...]          Upload files (large files are sent in chunks)
  list [page]                         List stored files, 10 per page
  delete <id> [<id> ...]              Delete stored files by id
  discard <upload-id>                 Drop an unfinished chunked upload
  url <id>                            Show the download URL of a file
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Examples:
  token s3cr3t
  upload ~/videos/movie.mp4 notes.txt
  list 2
  delete 9f1c2b7a4d3e5f60.mp4"""
