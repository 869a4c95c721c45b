"""StrEnum definitions for type-safe constants."""

from enum import StrEnum


class UploadPhase(StrEnum):
    """Phases of a single upload attempt."""

    IDLE = "idle"
    REQUESTING_TICKET = "requesting_ticket"
    TRANSFERRING = "transferring"
    CONFIRMING = "confirming"
    DONE = "done"
    FAILED = "failed"


class RejectionReason(StrEnum):
    """Why a file was rejected before upload."""

    UNSUPPORTED_TYPE = "unsupported_type"
    TOO_LARGE = "too_large"
    INVALID_SIZE = "invalid_size"
