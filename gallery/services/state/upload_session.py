"""Per-attempt upload state with an explicit transition table."""

from dataclasses import dataclass, replace

from gallery.enums import UploadPhase
from gallery.errors import UploadPhaseError
from gallery.models.domain import ImageRecord, UploadFile, UploadTicket

_TRANSITIONS: dict[UploadPhase, frozenset[UploadPhase]] = {
    UploadPhase.IDLE: frozenset({UploadPhase.REQUESTING_TICKET}),
    UploadPhase.REQUESTING_TICKET: frozenset({UploadPhase.TRANSFERRING, UploadPhase.FAILED}),
    UploadPhase.TRANSFERRING: frozenset({UploadPhase.CONFIRMING, UploadPhase.FAILED}),
    UploadPhase.CONFIRMING: frozenset({UploadPhase.DONE, UploadPhase.FAILED}),
    UploadPhase.DONE: frozenset({UploadPhase.IDLE}),
    UploadPhase.FAILED: frozenset({UploadPhase.IDLE}),
}

# Progress reported on entering each phase.
PROGRESS_CHECKPOINTS: dict[UploadPhase, int] = {
    UploadPhase.IDLE: 0,
    UploadPhase.REQUESTING_TICKET: 0,
    UploadPhase.TRANSFERRING: 25,
    UploadPhase.CONFIRMING: 75,
    UploadPhase.DONE: 100,
    UploadPhase.FAILED: 0,
}

ACTIVE_PHASES = frozenset(
    {UploadPhase.REQUESTING_TICKET, UploadPhase.TRANSFERRING, UploadPhase.CONFIRMING}
)
TERMINAL_PHASES = frozenset({UploadPhase.DONE, UploadPhase.FAILED})


class InvalidTransitionError(RuntimeError):
    """Raised on a phase change the state machine does not allow."""

    pass


@dataclass
class UploadSession:
    """State of a single upload attempt.

    A ticket is only ever held while transferring or confirming, and at
    most one at a time. Callers receive copies via ``snapshot``; only the
    owning orchestrator mutates the live instance.

    Attributes:
        phase: Current phase of the attempt.
        progress_percent: Checkpoint reached so far (0, 25, 75 or 100).
        file: File being uploaded; released once the upload is done.
        ticket: Live upload ticket, if any.
        error_message: Human-readable message after a failure.
        error: The error that failed the attempt.
        image: Confirmed image record after a successful upload.
    """

    phase: UploadPhase = UploadPhase.IDLE
    progress_percent: int = 0
    file: UploadFile | None = None
    ticket: UploadTicket | None = None
    error_message: str | None = None
    error: UploadPhaseError | None = None
    image: ImageRecord | None = None

    @property
    def is_active(self) -> bool:
        return self.phase in ACTIVE_PHASES

    @property
    def is_terminal(self) -> bool:
        return self.phase in TERMINAL_PHASES

    def snapshot(self) -> "UploadSession":
        return replace(self)

    def _move_to(self, target: UploadPhase) -> None:
        if target not in _TRANSITIONS[self.phase]:
            raise InvalidTransitionError(
                f"Illegal upload transition {self.phase} -> {target}"
            )
        self.phase = target
        self.progress_percent = PROGRESS_CHECKPOINTS[target]

    def begin(self, file: UploadFile) -> None:
        self._move_to(UploadPhase.REQUESTING_TICKET)
        self.file = file
        self.ticket = None
        self.error = None
        self.error_message = None
        self.image = None

    def ticket_issued(self, ticket: UploadTicket) -> None:
        if self.ticket is not None:
            raise InvalidTransitionError("Session already holds a live ticket")
        self._move_to(UploadPhase.TRANSFERRING)
        self.ticket = ticket

    def transferred(self) -> None:
        if self.ticket is None:
            raise InvalidTransitionError("Cannot confirm without a ticket")
        self._move_to(UploadPhase.CONFIRMING)

    def confirmed(self) -> None:
        if self.ticket is None:
            raise InvalidTransitionError("Cannot finish without a ticket")
        image = self.ticket.image
        self._move_to(UploadPhase.DONE)
        self.image = image
        self.ticket = None
        self.file = None

    def fail(self, error: UploadPhaseError) -> None:
        """Terminate the attempt. Keeps the file so it can be retried."""
        self._move_to(UploadPhase.FAILED)
        self.ticket = None
        self.error = error
        self.error_message = str(error)

    def reset(self) -> None:
        self._move_to(UploadPhase.IDLE)
        self.file = None
        self.ticket = None
        self.error = None
        self.error_message = None
        self.image = None
