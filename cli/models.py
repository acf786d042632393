"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class BreakCommand:
    """Break a file into pieces."""

    file_path: str
    secure: bool | None = None
    output_dir: str | None = None
    command: Literal["break"] = "break"


@dataclass(frozen=True)
class MendCommand:
    """Mend a full set of pieces into the original file."""

    piece_paths: tuple[str, ...]
    output_dir: str | None = None
    overwrite: bool = False
    command: Literal["mend"] = "mend"


@dataclass(frozen=True)
class InspectCommand:
    """Show the metadata of a piece."""

    piece_path: str
    command: Literal["inspect"] = "inspect"


@dataclass(frozen=True)
class SecureModeCommand:
    """Turn encryption on or off for break commands without --secure/--plain."""

    enabled: bool
    command: Literal["secure"] = "secure"


CommandRequest = BreakCommand | MendCommand | InspectCommand | SecureModeCommand
