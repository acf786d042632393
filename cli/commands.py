"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Optional

from common.exceptions import TriptychError
from common.logging_config import get_logger
from cli.config import Config
from cli.models import BreakCommand, InspectCommand, MendCommand, SecureModeCommand
from cli.utils import ProgressPrinter, format_file_size, format_metadata
from engine.fragmenter import storable_name
from engine.services.piece_service import PieceService

logger = get_logger(__name__)


_service: Optional[PieceService] = None
_config: Optional[Config] = None


def get_service() -> PieceService:
    """
    Get or create global PieceService instance.

    Returns:
        PieceService instance
    """
    global _service
    if _service is None:
        logger.debug("Creating new PieceService instance")
        _service = PieceService()
    return _service


def get_config() -> Config:
    """
    Get or create global Config instance.

    Returns:
        Config instance backed by ~/.triptych/config.json
    """
    global _config
    if _config is None:
        _config = Config(Path.home() / '.triptych' / 'config.json')
    return _config


def handle_break(
    cmd: BreakCommand,
    service: Optional[PieceService] = None,
    config: Optional[Config] = None,
) -> str:
    """
    Handle 'break' command.

    Args:
        cmd: BreakCommand with file path and options
        service: Optional PieceService for dependency injection (testing)
        config: Optional Config for dependency injection (testing)

    Returns:
        Success or error message listing the written pieces
    """
    service = service or get_service()
    config = config or get_config()

    secure = cmd.secure if cmd.secure is not None else config.is_secure_by_default()
    output_dir = Path(cmd.output_dir) if cmd.output_dir else config.get_output_dir()
    logger.info(f"Executing break command: file={cmd.file_path} secure={secure} output_dir={output_dir}")

    try:
        size = Path(cmd.file_path).stat().st_size
        pieces = service.break_file(
            Path(cmd.file_path),
            output_dir=output_dir,
            protect=secure,
            progress=ProgressPrinter(f"Breaking {storable_name(Path(cmd.file_path).name)}"),
        )
    except FileNotFoundError:
        return f"Error: File not found: {cmd.file_path}"
    except (TriptychError, OSError) as e:
        logger.debug("Break command failed", exc_info=True)
        return f"Error: {e}"

    mode = "encrypted" if secure else "unencrypted"
    lines = [f"Broke {storable_name(cmd.file_path)} ({format_file_size(size)}) into {len(pieces)} {mode} pieces:"]
    lines.extend(f"  {piece}" for piece in pieces)
    return "\n".join(lines)


def handle_mend(
    cmd: MendCommand,
    service: Optional[PieceService] = None,
    config: Optional[Config] = None,
) -> str:
    """
    Handle 'mend' command.

    Args:
        cmd: MendCommand with piece paths and options
        service: Optional PieceService for dependency injection (testing)
        config: Optional Config for dependency injection (testing)

    Returns:
        Success or error message with the mended file path
    """
    service = service or get_service()
    config = config or get_config()

    output_dir = Path(cmd.output_dir) if cmd.output_dir else config.get_mend_dir()
    overwrite = cmd.overwrite or config.allow_overwrite()
    logger.info(f"Executing mend command: {len(cmd.piece_paths)} pieces, output_dir={output_dir}")

    try:
        target = service.mend_files(
            [Path(p) for p in cmd.piece_paths],
            output_dir=output_dir,
            progress=ProgressPrinter("Mending"),
            overwrite=overwrite,
        )
    except TriptychError as e:
        logger.debug("Mend command failed", exc_info=True)
        return f"Error: {e}"

    return f"Mended {target} ({format_file_size(target.stat().st_size)})"


def handle_inspect(cmd: InspectCommand, service: Optional[PieceService] = None) -> str:
    """
    Handle 'inspect' command.

    Args:
        cmd: InspectCommand with the piece path
        service: Optional PieceService for dependency injection (testing)

    Returns:
        Formatted piece metadata or error message
    """
    service = service or get_service()
    try:
        metadata = service.inspect_piece(Path(cmd.piece_path))
    except TriptychError as e:
        return f"Error: {e}"
    return format_metadata(metadata)


def handle_secure_mode(cmd: SecureModeCommand, config: Optional[Config] = None) -> str:
    """
    Handle 'secure' command.

    Args:
        cmd: SecureModeCommand with the new default
        config: Optional Config for dependency injection (testing)

    Returns:
        Confirmation message
    """
    config = config or get_config()
    config.set_secure_by_default(cmd.enabled)
    return f"Secure mode {'on' if cmd.enabled else 'off'}"
