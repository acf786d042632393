"""Pydantic schema for the metadata block carried by every piece."""

import base64
import binascii
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from common.constants import COMPRESSION_ALGORITHM, PIECE_COUNT, PIECE_FORMAT_VERSION


class PieceMetadata(BaseModel):
    """Metadata stored ahead of a piece payload."""

    model_config = ConfigDict(frozen=True)

    version: int = PIECE_FORMAT_VERSION
    operation_id: str = Field(min_length=1)
    index: int = Field(ge=0, lt=PIECE_COUNT)
    total: int = PIECE_COUNT
    file_name: str = Field(min_length=1)
    created_at: str
    protected: bool
    key_share: str = ""
    salt: str = ""
    file_hash: str = Field(pattern=r"^[0-9a-f]{64}$")
    payload_checksum: str = Field(pattern=r"^[0-9a-f]{64}$")
    compression: Literal["zlib"] = COMPRESSION_ALGORITHM

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: int) -> int:
        if value != PIECE_FORMAT_VERSION:
            raise ValueError(f"unsupported piece format version {value}")
        return value

    @field_validator("total")
    @classmethod
    def _check_total(cls, value: int) -> int:
        if value != PIECE_COUNT:
            raise ValueError(f"piece set size must be {PIECE_COUNT}, got {value}")
        return value

    @field_validator("created_at")
    @classmethod
    def _check_timestamp(cls, value: str) -> str:
        datetime.fromisoformat(value)
        return value

    @field_validator("key_share", "salt")
    @classmethod
    def _check_base64(cls, value: str) -> str:
        if value:
            try:
                base64.b64decode(value, validate=True)
            except binascii.Error as e:
                raise ValueError(f"invalid base64: {e}")
        return value

    @model_validator(mode="after")
    def _check_protection_fields(self) -> "PieceMetadata":
        if self.protected and not (self.key_share and self.salt):
            raise ValueError("protected piece requires key_share and salt")
        if not self.protected and (self.key_share or self.salt):
            raise ValueError("unprotected piece must not carry key_share or salt")
        return self

    def key_share_bytes(self) -> bytes:
        return base64.b64decode(self.key_share)

    def salt_bytes(self) -> bytes:
        return base64.b64decode(self.salt)

    def associated_data(self) -> bytes:
        return associated_data(self.operation_id, self.index)


def associated_data(operation_id: str, index: int) -> bytes:
    """Bytes bound into the authentication tag of a protected payload."""
    return f"{operation_id}:{index}".encode("utf-8")
