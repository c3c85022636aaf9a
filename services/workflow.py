"""
Submission workflow (orchestration layer).

Wires the user actions to the services:

    download: compose image -> hand bytes to caller for local save -> record
    send:     compose image -> upload to webhook -> record (success or not)
    reset:    confirm -> clear the count store

State Machine:
    IDLE -> GENERATING_IMAGE -> IDLE                 (download, or failed compose)
    IDLE -> GENERATING_IMAGE -> UPLOADING -> IDLE    (send)

    Any failure sets a single error string and returns to IDLE. Starting a
    new action clears the previous error first, so the latest action's
    outcome always wins. Reset is only allowed from IDLE.

Recording is best-effort: exceptions from the recorder are logged with a
traceback and never reach the caller.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from core.catalog import CATALOG, Catalog
from core.exceptions import WorkflowBusyError
from models.counts import ConfirmCallback, CountStore
from models.results import ImageGenerationResult, UploadResult
from models.submission import SubmissionChannel
from services.image_generator import ImageGenerator
from services.submission_recorder import SubmissionRecorder
from services.upload_client import UploadClient
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


class WorkflowState(Enum):
    """States observed by the presentation layer."""

    IDLE = "idle"
    GENERATING_IMAGE = "generatingImage"
    UPLOADING = "uploading"


def default_upload_message(moment: datetime) -> str:
    """e.g. "Laundry submission (3/7/2026, 4:05:09 PM)"."""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    stamp = (
        f"{moment.month}/{moment.day}/{moment.year}, "
        f"{hour}:{moment.minute:02d}:{moment.second:02d} {suffix}"
    )
    return f"Laundry submission ({stamp})"


class SubmissionWorkflow:
    """
    One user's download/send/reset flow.

    A workflow runs a single action at a time; download and send are
    mutually exclusive.

    Attributes:
        state: Current WorkflowState
        error: Latest user-visible error, or None
    """

    def __init__(
        self,
        image_generator: ImageGenerator,
        upload_client: UploadClient,
        recorder: Optional[SubmissionRecorder],
        catalog: Catalog = CATALOG,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._image_generator = image_generator
        self._upload_client = upload_client
        self._recorder = recorder
        self._catalog = catalog
        self._clock = clock
        self.state = WorkflowState.IDLE
        self.error: Optional[str] = None

    @property
    def is_idle(self) -> bool:
        return self.state == WorkflowState.IDLE

    def download(self, store: CountStore) -> ImageGenerationResult:
        """
        Compose the image for local save and record a download submission.

        The caller delivers result.image to the user; nothing is retried.
        """
        self._begin("download")

        result = self._generate(store)
        if result.success:
            self._record(store, SubmissionChannel.DOWNLOAD, True)

        self.state = WorkflowState.IDLE
        return result

    def send(self, store: CountStore, message: Optional[str] = None) -> UploadResult:
        """
        Compose the image and upload it to the webhook.

        A submission is recorded whatever the outcome.
        """
        self._begin("send")
        upload = UploadResult.create_failed("Image generation failed")

        try:
            image = self._generate(store)
            if not image.success:
                upload = UploadResult.create_failed(image.error or "Image generation failed")
                return upload

            self.state = WorkflowState.UPLOADING
            upload = self._upload_client.upload_image(
                image.image,
                image.filename,
                message or default_upload_message(self._clock()),
            )
            if not upload.success:
                self.error = upload.error
                logger.warning(f"Upload failed: {upload.error}")
            return upload
        finally:
            self._record(store, SubmissionChannel.DISCORD, upload.success)
            self.state = WorkflowState.IDLE

    def reset(self, store: CountStore, confirm: ConfirmCallback) -> bool:
        """
        Clear all counts after confirmation.

        Raises:
            WorkflowBusyError: If an action is in progress
        """
        if not self.is_idle:
            raise WorkflowBusyError(self.state.value, "reset")

        reset = store.reset_counts(confirm)
        logger.info("Counts reset" if reset else "Reset declined")
        return reset

    def clear_error(self) -> None:
        self.error = None

    def _begin(self, action: str) -> None:
        if not self.is_idle:
            raise WorkflowBusyError(self.state.value, action)
        self.clear_error()
        self.state = WorkflowState.GENERATING_IMAGE

    def _generate(self, store: CountStore) -> ImageGenerationResult:
        result = self._image_generator.generate_image(store.all_counts(), self._catalog)
        if not result.success:
            self.error = result.error
            logger.error(f"Image generation failed: {result.error}")
        return result

    def _record(self, store: CountStore, channel: SubmissionChannel, success: bool) -> None:
        if self._recorder is None:
            logger.debug("No recorder configured, skipping submission log")
            return
        try:
            self._recorder.record_submission(
                store.all_counts(),
                channel=channel,
                channel_success=success,
            )
        except Exception as e:
            logger.error(f"Submission recording failed: {e}", exc_info=True)
