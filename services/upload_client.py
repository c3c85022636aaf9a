"""
Webhook upload client.

Posts a rendered image to a Discord webhook as a multipart message, with
bounded retries, a total deadline per attempt and a payload size ceiling.

Error Taxonomy:
    - Validation errors (missing/malformed URL, oversized or empty payload)
      are returned immediately, before any network call, and never retried
    - Transient errors (network failure, non-2xx status, timeout) are
      retried; once attempts are exhausted they collapse into one generic
      "Upload failed after all retry attempts" message

Usage:
    client = create_upload_client(
        UploadConfig(webhook_url=app.config["DISCORD_WEBHOOK_URL"]),
        backend=app.config["UPLOAD_BACKEND"],
    )

    result = client.upload_image(image_bytes, "laundry-output-....png")
    if not result.success:
        show_error(result.error)
"""

from __future__ import annotations

import json
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional
from urllib.parse import urlparse

import requests

from core import constants
from core.exceptions import ConfigurationError
from models.results import UploadResult
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

UPLOAD_BACKENDS = ("http", "mock")


@dataclass
class UploadConfig:
    """Webhook endpoint and retry policy."""

    webhook_url: str = ""
    max_retries: int = constants.DEFAULT_MAX_RETRIES
    retry_delay_ms: int = constants.DEFAULT_RETRY_DELAY_MS
    timeout_ms: int = constants.DEFAULT_TIMEOUT_MS


def format_file_size(size: int) -> str:
    """Human-readable size: B below 1 KB, KB below 1 MB, MB otherwise."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def is_valid_webhook_url(url: str) -> bool:
    """True for https://discord.com/api/webhooks/... style URLs."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return (
        parsed.hostname == constants.WEBHOOK_HOST
        and constants.WEBHOOK_PATH_MARKER in parsed.path
    )


class UploadClient(ABC):
    """Contract for delivering an encoded image to a remote channel."""

    @abstractmethod
    def upload_image(
        self,
        image: bytes,
        filename: str,
        message: Optional[str] = None,
    ) -> UploadResult:
        """Deliver the image; failures are returned, never raised."""

    @abstractmethod
    def validate_configuration(self) -> List[str]:
        """Return human-readable configuration errors (empty when valid)."""


class WebhookUploadClient(UploadClient):
    """
    Discord webhook client built on requests.

    Each attempt is an independent POST; the session is reused for
    connection pooling only.
    """

    def __init__(
        self,
        config: UploadConfig,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self._session = session or requests.Session()
        self._sleep = sleep
        self._clock = clock

    @property
    def total_attempts(self) -> int:
        return 1 + max(0, self.config.max_retries)

    def upload_image(
        self,
        image: bytes,
        filename: str,
        message: Optional[str] = None,
    ) -> UploadResult:
        errors = self.validate_configuration()
        if errors:
            logger.error(f"Upload rejected, invalid configuration: {errors}")
            return UploadResult.create_failed(", ".join(errors))

        size_error = self._validate_file_size(image)
        if size_error:
            logger.error(f"Upload rejected: {size_error}")
            return UploadResult.create_failed(size_error)

        last_status: Optional[int] = None
        for attempt in range(1, self.total_attempts + 1):
            try:
                result = self._attempt_upload(image, filename, message)
            except requests.RequestException as e:
                logger.warning(f"Upload attempt {attempt}/{self.total_attempts} failed: {e}")
            else:
                if result.success:
                    logger.info(
                        f"Upload succeeded on attempt {attempt} "
                        f"(status={result.status_code}, message_id={result.message_id})"
                    )
                    return result
                last_status = result.status_code
                logger.warning(
                    f"Upload attempt {attempt}/{self.total_attempts} failed: "
                    f"{result.error} (status={result.status_code})"
                )

            if attempt < self.total_attempts:
                self._sleep(self.config.retry_delay_ms / 1000.0)

        logger.error(f"Upload of {filename} failed after {self.total_attempts} attempts")
        return UploadResult.create_failed(constants.UPLOAD_RETRIES_EXHAUSTED, last_status)

    def validate_configuration(self) -> List[str]:
        errors: List[str] = []

        if not self.config.webhook_url:
            errors.append(constants.WEBHOOK_URL_NOT_SET)
        elif not is_valid_webhook_url(self.config.webhook_url):
            errors.append(constants.WEBHOOK_URL_INVALID)

        return errors

    def _attempt_upload(
        self,
        image: bytes,
        filename: str,
        message: Optional[str],
    ) -> UploadResult:
        payload = {"content": message or constants.DEFAULT_UPLOAD_MESSAGE}
        files = {"files[0]": (filename, image, constants.IMAGE_MIME_TYPE)}
        timeout = self.config.timeout_ms / 1000.0
        deadline = self._clock() + timeout

        try:
            response = self._session.post(
                self.config.webhook_url,
                params={"wait": "true"},
                data={"payload_json": json.dumps(payload)},
                files=files,
                timeout=timeout,
                stream=True,
            )
            try:
                if not response.ok:
                    return UploadResult.create_failed(
                        constants.WEBHOOK_REQUEST_FAILED, response.status_code
                    )
                body = self._read_body(response, deadline)
            finally:
                response.close()
        except requests.Timeout:
            return UploadResult.create_failed(
                constants.UPLOAD_TIMEOUT, constants.TIMEOUT_STATUS_CODE
            )

        message_id = None
        if body:
            try:
                message_id = json.loads(body).get("id")
            except (ValueError, AttributeError):
                logger.debug("Webhook response carried no message id")

        return UploadResult.create_success(response.status_code, message_id)

    def _read_body(self, response: requests.Response, deadline: float) -> bytes:
        """
        Read the response body, giving up once the attempt deadline passes.

        The requests timeout bounds each socket read; this bounds the attempt
        as a whole, from the POST until the last body chunk.

        Raises:
            requests.Timeout: If the deadline passes before the body is complete
        """
        chunks = []
        self._check_deadline(deadline)
        for chunk in response.iter_content(chunk_size=constants.RESPONSE_CHUNK_SIZE):
            chunks.append(chunk)
            self._check_deadline(deadline)
        return b"".join(chunks)

    def _check_deadline(self, deadline: float) -> None:
        if self._clock() > deadline:
            raise requests.Timeout(
                f"Upload attempt exceeded {self.config.timeout_ms} ms"
            )

    @staticmethod
    def _validate_file_size(image: bytes) -> Optional[str]:
        if not image:
            return "Invalid image provided"

        if len(image) > constants.MAX_FILE_SIZE_BYTES:
            return (
                f"File size ({format_file_size(len(image))}) exceeds Discord limit "
                f"({format_file_size(constants.MAX_FILE_SIZE_BYTES)})"
            )

        return None


class MockUploadClient(UploadClient):
    """In-memory stand-in used in tests and local demos; no network."""

    def __init__(self, should_succeed: bool = True):
        self.should_succeed = should_succeed
        self.uploads: List[dict] = []

    def upload_image(
        self,
        image: bytes,
        filename: str,
        message: Optional[str] = None,
    ) -> UploadResult:
        self.uploads.append({
            "filename": filename,
            "size": len(image) if image else 0,
            "message": message or constants.DEFAULT_UPLOAD_MESSAGE,
        })

        if self.should_succeed:
            return UploadResult.create_success(200, "mock-message-id")
        return UploadResult.create_failed("Mock upload failure", 500)

    def validate_configuration(self) -> List[str]:
        return []


def create_upload_client(config: UploadConfig, backend: str = "http") -> UploadClient:
    """
    Build the upload client selected by an explicit backend flag.

    Args:
        config: Endpoint and retry policy
        backend: "http" for the real webhook, "mock" for the in-memory client

    Raises:
        ConfigurationError: If backend is not a known value
    """
    if backend == "http":
        logger.info("Creating webhook upload client")
        return WebhookUploadClient(config)
    if backend == "mock":
        logger.info("Creating mock upload client")
        return MockUploadClient()

    raise ConfigurationError(
        f"Unknown upload backend '{backend}'. Expected one of: {', '.join(UPLOAD_BACKENDS)}",
        setting="UPLOAD_BACKEND",
    )
