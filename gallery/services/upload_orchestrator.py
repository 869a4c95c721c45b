"""Client-side upload orchestration.

Drives one file through the three-phase presigned upload protocol:

1. request a ticket from the backend (pending image record + presigned PUT)
2. transfer the raw bytes to object storage using the ticket verbatim
3. confirm completion with the backend

Phases are strictly sequential since each one consumes the previous
phase's output. Network failures are terminal for the attempt and are
recorded on the session rather than raised; a new ``start`` always begins
with a fresh ticket.
"""

import logging
from collections.abc import Callable

from gallery.api.client import GalleryApiClient
from gallery.config import GalleryConfig
from gallery.enums import UploadPhase
from gallery.errors import (
    BusyError,
    CompletionError,
    InvalidInputError,
    StorageTransferError,
    TicketRequestError,
    UploadPhaseError,
)
from gallery.models.domain import UploadFile
from gallery.services.state.upload_session import UploadSession
from gallery.services.validation import ValidationResult, validate_upload

logger = logging.getLogger(__name__)

UploadListener = Callable[[UploadSession], None]

# Error used when a phase is interrupted by something other than its own
# HTTP failure (e.g. task cancellation).
_PHASE_ERRORS: dict[UploadPhase, type[UploadPhaseError]] = {
    UploadPhase.REQUESTING_TICKET: TicketRequestError,
    UploadPhase.TRANSFERRING: StorageTransferError,
    UploadPhase.CONFIRMING: CompletionError,
}


class UploadOrchestrator:
    """Upload state machine for a single in-flight file.

    The orchestrator is a plain state holder: ``session`` is a synchronous
    getter returning a snapshot, and ``subscribe`` registers callbacks that
    receive a snapshot at every phase boundary. It is not tied to any view
    layer.

    Only one upload may be in flight per instance; a concurrent ``start``
    fails fast with ``BusyError``.
    """

    def __init__(self, api: GalleryApiClient, config: GalleryConfig | None = None) -> None:
        """Initialize the orchestrator.

        Args:
            api: Backend/storage client used for the three phases.
            config: Validation settings; defaults to the API client's config.
        """
        self.api = api
        self.config = config or api.config
        self._session = UploadSession()
        self._listeners: list[UploadListener] = []

    @property
    def session(self) -> UploadSession:
        """Snapshot of the current session."""
        return self._session.snapshot()

    def subscribe(self, listener: UploadListener) -> Callable[[], None]:
        """Register a callback for session updates.

        Args:
            listener: Called synchronously with a session snapshot on every
                transition.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self) -> None:
        snapshot = self._session.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Upload listener %r failed", listener)

    def validate(self, file: UploadFile) -> ValidationResult:
        """Classify ``file`` against the configured type and size limits. No I/O."""
        return validate_upload(
            file,
            allowed_types=self.config.allowed_mime_types,
            max_bytes=self.config.max_upload_size_bytes,
        )

    async def start(self, file: UploadFile) -> UploadSession:
        """Upload ``file`` through all three phases.

        Starting from a done or failed session begins a brand new attempt.

        Args:
            file: The file to upload.

        Returns:
            Snapshot of the final session, in phase ``done`` or ``failed``.

        Raises:
            BusyError: If an upload is already in flight.
            InvalidInputError: If the file fails validation.
        """
        if self._session.is_active:
            raise BusyError("An upload is already in progress")

        result = self.validate(file)
        if not result.valid:
            raise InvalidInputError(result.error_message or "Invalid file", result.reason)

        if self._session.is_terminal:
            self._session.reset()

        # Entering an active phase before the first await is what makes a
        # concurrent start observe the session as busy.
        self._session.begin(file)
        self._emit()

        try:
            ticket = await self.api.request_upload(file)
            self._session.ticket_issued(ticket)
            self._emit()

            await self.api.transfer(ticket, file.data)
            self._session.transferred()
            self._emit()

            await self.api.complete_upload(ticket.image)
            self._session.confirmed()
        except UploadPhaseError as e:
            self._fail(e)
        except BaseException as e:
            if self._session.is_active:
                error_cls = _PHASE_ERRORS[self._session.phase]
                self._fail(error_cls(detail=f"interrupted: {type(e).__name__}"))
                self._emit()
            raise
        else:
            logger.info(
                "Uploaded %s as image %s (%d bytes)",
                file.name,
                ticket.image.id,
                file.size,
            )

        self._emit()
        return self.session

    def _fail(self, error: UploadPhaseError) -> None:
        if isinstance(error, CompletionError) and self._session.ticket is not None:
            image = self._session.ticket.image
            # The object may already be in storage without a confirmed record.
            logger.error(
                "Upload of %s reached storage but was not confirmed "
                "(image=%s, object_key=%s): %s",
                image.original_name,
                image.id,
                image.object_key,
                error,
            )
        else:
            logger.warning("Upload failed during %s: %s", self._session.phase, error)
        self._session.fail(error)

    async def retry(self) -> UploadSession:
        """Start a fresh attempt with the file from the last failed upload.

        Raises:
            InvalidInputError: If there is no failed upload to retry.
            BusyError: If an upload is already in flight.
        """
        if self._session.is_active:
            raise BusyError("An upload is already in progress")
        if self._session.phase != UploadPhase.FAILED or self._session.file is None:
            raise InvalidInputError("There is no failed upload to retry")
        return await self.start(self._session.file)

    def reset(self) -> None:
        """Return a done or failed session to idle.

        Raises:
            BusyError: If an upload is in flight.
        """
        if self._session.is_active:
            raise BusyError("Cannot reset while an upload is in progress")
        if self._session.phase == UploadPhase.IDLE:
            return
        self._session.reset()
        self._emit()
