"""Configuration management for Triptych CLI."""

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path

from common.constants import DEFAULT_OUTPUT_DIR

logger = logging.getLogger(__name__)


class Config:
    """Manages CLI configuration stored in JSON file."""

    DEFAULT_CONFIG = {
        "output_dir": os.environ.get("TRIPTYCH_OUTPUT_DIR", DEFAULT_OUTPUT_DIR),
        "mend_dir": os.environ.get("TRIPTYCH_MEND_DIR", "mended"),
        "secure_by_default": False,
        "overwrite": False,
    }

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.triptych/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            self.config_path = Path(tempfile.gettempdir()) / '.triptych' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError("config root must be an object")
                config = self.DEFAULT_CONFIG.copy()
                config.update(data)
                return config
            except (json.JSONDecodeError, ValueError, OSError) as e:
                logger.warning(f"Ignoring unreadable config {self.config_path}: {e}")
                backup_path = self.config_path.with_suffix('.json.bak')
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError:
                    pass
                return self.DEFAULT_CONFIG.copy()
        else:
            config = self.DEFAULT_CONFIG.copy()
            try:
                with open(self.config_path, 'w') as f:
                    json.dump(config, f, indent=2)
            except OSError:
                pass
            return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except OSError as e:
            logger.warning(f"Could not save config {self.config_path}: {e}")

    def get_output_dir(self) -> Path:
        """
        Get directory where new pieces are written.

        Returns:
            Output directory path
        """
        return Path(self.data.get('output_dir', DEFAULT_OUTPUT_DIR))

    def get_mend_dir(self) -> Path:
        """
        Get directory where mended files are written.

        Returns:
            Mend directory path
        """
        return Path(self.data.get('mend_dir', 'mended'))

    def is_secure_by_default(self) -> bool:
        return bool(self.data.get('secure_by_default', False))

    def allow_overwrite(self) -> bool:
        return bool(self.data.get('overwrite', False))

    def set_secure_by_default(self, enabled: bool) -> None:
        """
        Set whether break encrypts pieces when neither --secure nor --plain is given.

        Args:
            enabled: New default
        """
        self.data['secure_by_default'] = enabled
        self.save()
