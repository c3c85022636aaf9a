"""
Services layer for the laundry counter.

This module contains the business logic services:
- ImageGenerator: Renders counts onto the template image (Pillow)
- UploadClient: Posts the image to a webhook with retry (requests)
- SubmissionRecorder: Append-only submission log with analytics queries
- SubmissionWorkflow: Download / send / reset orchestration

Service Ownership:
    The app factory builds one image generator, one upload client and one
    recorder (over one AnalyticsDatabase) and stores them in app.config.
    A SubmissionWorkflow is built per request around the user's CountStore.
"""

from .image_generator import (
    ImageGenerationOptions,
    ImageGenerator,
    PillowImageGenerator,
    create_image_generator,
)
from .upload_client import (
    MockUploadClient,
    UploadClient,
    UploadConfig,
    WebhookUploadClient,
    create_upload_client,
)
from .submission_recorder import SubmissionRecorder, create_submission_recorder
from .workflow import SubmissionWorkflow, WorkflowState

__all__ = [
    "ImageGenerationOptions",
    "ImageGenerator",
    "PillowImageGenerator",
    "create_image_generator",
    "MockUploadClient",
    "UploadClient",
    "UploadConfig",
    "WebhookUploadClient",
    "create_upload_client",
    "SubmissionRecorder",
    "create_submission_recorder",
    "SubmissionWorkflow",
    "WorkflowState",
]
