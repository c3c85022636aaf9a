"""
Data models for the laundry counter.

This module contains:
- CountStore: Per-session predefined and custom item counts
- ImageGenerationResult / UploadResult: Outcomes of compose and send
- SubmissionRecord and friends: Rows read back from the analytics log

Submission records are frozen dataclasses; the log is append-only.
"""

from .counts import CountStore, ItemCounts, sanitize_count
from .results import ImageGenerationResult, UploadResult
from .submission import (
    AnalyticsSummary,
    ChannelStats,
    ItemFrequency,
    SubmissionChannel,
    SubmissionItem,
    SubmissionRecord,
)

__all__ = [
    # Count models
    "CountStore",
    "ItemCounts",
    "sanitize_count",
    # Result models
    "ImageGenerationResult",
    "UploadResult",
    # Submission models
    "AnalyticsSummary",
    "ChannelStats",
    "ItemFrequency",
    "SubmissionChannel",
    "SubmissionItem",
    "SubmissionRecord",
]
