"""Project-wide constants (piece count, key sizes, piece format markers)."""

PIECE_COUNT: int = 3

CONTENT_KEY_SIZE: int = 32
SALT_SIZE: int = 32
NONCE_SIZE: int = 12
TAG_SIZE: int = 16

KEY_DERIVATION_INFO: bytes = b"triptych.fragment-key.v1"

PIECE_MAGIC: bytes = b"TRIPTYCH"
PIECE_FORMAT_VERSION: int = 1
PIECE_SEPARATOR: bytes = b"\n--PIECE--\n"
PIECE_FILE_SUFFIX: str = ".piece"

COMPRESSION_ALGORITHM: str = "zlib"
DEFAULT_COMPRESSION_LEVEL: int = 6

DEFAULT_OUTPUT_DIR: str = "pieces"
