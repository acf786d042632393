"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

from common.constants import PIECE_COUNT, PIECE_FILE_SUFFIX

COMMANDS = ["break", "mend", "inspect", "secure", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#C9A227 bold",
        "command": "#0088ff bold",
    }
)

GOLD = "\033[38;2;201;162;39m"
GREEN = "\033[32m"
RESET = "\033[0m"

LOGO = f"""{GOLD}
 ████████╗██████╗ ██╗██████╗ ████████╗██╗   ██╗ ██████╗██╗  ██╗
 ╚══██╔══╝██╔══██╗██║██╔══██╗╚══██╔══╝╚██╗ ██╔╝██╔════╝██║  ██║
    ██║   ██████╔╝██║██████╔╝   ██║    ╚████╔╝ ██║     ███████║
    ██║   ██╔══██╗██║██╔═══╝    ██║     ╚██╔╝  ██║     ██╔══██║
    ██║   ██║  ██║██║██║        ██║      ██║   ╚██████╗██║  ██║
    ╚═╝   ╚═╝  ╚═╝╚═╝╚═╝        ╚═╝      ╚═╝    ╚═════╝╚═╝  ╚═╝
{RESET}"""

WELCOME_TITLE = f"Triptych - break files into {PIECE_COUNT} pieces and mend them back"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "triptych> "

HELP_TEXT = f"""Available commands:
  break <file> [--secure|--plain] [--out DIR]      Break a file into {PIECE_COUNT} pieces
  mend <piece> <piece> <piece> [--out DIR] [--overwrite]
                                                   Mend {PIECE_COUNT} pieces back into the original file
  inspect <piece>                                  Show the metadata of a piece
  secure on|off                                    Encrypt pieces by default (saved in config)
  clear                                            Clear screen and redisplay welcome message
  help                                             Show this help
  exit                                             Exit REPL

--secure encrypts the pieces; every piece is then needed to read any of them.
Pieces may be given to mend in any order.
Examples:
  break report.pdf
  break report.pdf --secure --out shared/
  inspect pieces/report.pdf.1a2b3c4d.part1of3{PIECE_FILE_SUFFIX}
  mend pieces/report.pdf.1a2b3c4d.part*{PIECE_FILE_SUFFIX} --out restored/"""
