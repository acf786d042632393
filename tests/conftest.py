"""Shared pytest fixtures for all tests."""

import pytest
from cli.config import Config
from engine.fragmenter import Fragmenter
from engine.reconstructor import Reconstructor
from engine.services.piece_service import PieceService


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .triptych directory
    """
    config_dir = tmp_path / '.triptych'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Args:
        temp_config_dir: Temporary config directory fixture

    Returns:
        Config instance with temp config file
    """
    config = Config(temp_config_dir / 'config.json')
    config.data['output_dir'] = str(temp_config_dir.parent / 'pieces')
    config.data['mend_dir'] = str(temp_config_dir.parent / 'mended')
    return config


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for break/mend tests.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to sample binary file
    """
    file_path = tmp_path / 'report.bin'
    file_path.write_bytes(bytes(range(256)) * 41 + b'tail')
    return file_path


@pytest.fixture
def service():
    """PieceService running fragments sequentially."""
    return PieceService(Fragmenter(workers=1), Reconstructor(workers=1))


@pytest.fixture
def events():
    """
    Collect progress events.

    Returns:
        List that records every event passed to its append method
    """
    return []
