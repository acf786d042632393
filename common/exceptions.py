"""Custom exception classes shared by the engine, service and CLI."""


class TriptychError(Exception):
    """
    Base exception class for all fragmentation and reconstruction errors.
    """
    pass


class FormatError(TriptychError):
    """
    Raised when a piece is malformed or its metadata fails validation.
    """
    pass


class CompressionError(TriptychError):
    """
    Raised when the compression codec fails or compressed input is corrupt.
    """
    pass


class AuthenticationError(TriptychError):
    """
    Raised when an encrypted payload fails tag verification or is malformed.
    """
    pass


class IncompleteKeyError(TriptychError):
    """
    Raised when one or more key shares are missing during key recombination.
    """
    pass


class IncompletePieceSetError(TriptychError):
    """
    Raised when pieces do not form one complete set from a single operation.
    """
    pass


class PieceCountError(IncompletePieceSetError):
    """
    Raised when the number of pieces handed to reconstruction is not PIECE_COUNT.
    """
    pass


class IntegrityError(TriptychError):
    """
    Raised when reassembled content or a stored payload does not match its checksum.
    """
    pass


class PieceIOError(TriptychError):
    """
    Raised when reading or writing piece files or output files fails.
    """
    pass


class OperationCancelledError(TriptychError):
    """
    Raised when an operation is cancelled between fragment boundaries.
    """
    pass
