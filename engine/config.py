"""Configuration settings for the fragmentation engine."""

import os
from common.constants import DEFAULT_COMPRESSION_LEVEL, DEFAULT_OUTPUT_DIR, PIECE_COUNT


OUTPUT_DIR = os.environ.get("TRIPTYCH_OUTPUT_DIR", DEFAULT_OUTPUT_DIR)

COMPRESSION_LEVEL = int(os.environ.get("TRIPTYCH_COMPRESSION_LEVEL", str(DEFAULT_COMPRESSION_LEVEL)))

WORKERS = max(1, int(os.environ.get("TRIPTYCH_WORKERS", str(PIECE_COUNT))))
