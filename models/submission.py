"""
Submission log data models.

These models represent rows read back from the analytics database.
Submission records are append-only: created once per completed download
or send attempt and never modified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class SubmissionChannel(Enum):
    """Delivery path used for a submission."""

    DOWNLOAD = "download"
    """Image saved locally by the user."""

    DISCORD = "discord"
    """Image posted to the configured webhook."""

    WHATSAPP = "whatsapp"
    VIBER = "viber"
    MESSENGER = "messenger"

    @classmethod
    def values(cls) -> List[str]:
        return [channel.value for channel in cls]


@dataclass(frozen=True)
class SubmissionItem:
    """One non-zero item count recorded with a submission."""

    name: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "count": self.count}


@dataclass(frozen=True)
class SubmissionRecord:
    """A logged submission with its item rows."""

    id: int
    timestamp: str
    channel: str
    total_items: int
    items_with_values: int
    channel_success: bool
    customer_reference: Optional[str] = None
    scenario: Optional[str] = None
    items: List[SubmissionItem] = field(default_factory=list)

    @classmethod
    def from_row(cls, row, items: List[SubmissionItem]) -> "SubmissionRecord":
        """Build from a sqlite3.Row of the submissions table."""
        return cls(
            id=row["id"],
            timestamp=row["timestamp"],
            channel=row["channel"],
            total_items=row["total_items"],
            items_with_values=row["items_with_values"],
            channel_success=bool(row["channel_success"]),
            customer_reference=row["customer_reference"],
            scenario=row["scenario"],
            items=items,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses and export."""
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "channel": self.channel,
            "customer_reference": self.customer_reference,
            "scenario": self.scenario,
            "total_items": self.total_items,
            "items_with_values": self.items_with_values,
            "channel_success": self.channel_success,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class ChannelStats:
    """Submission count and success rate (percent) for one channel."""

    channel: str
    count: int
    success_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "channel": self.channel,
            "count": self.count,
            "successRate": self.success_rate,
        }


@dataclass(frozen=True)
class ItemFrequency:
    """How often an item appears across submissions, and its total count."""

    name: str
    total_count: int
    frequency: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "totalCount": self.total_count,
            "frequency": self.frequency,
        }


@dataclass(frozen=True)
class AnalyticsSummary:
    """Global view of the submission log."""

    total_submissions: int
    successful_submissions: int
    failed_submissions: int
    average_items_per_submission: float
    most_frequent_items: List[ItemFrequency]
    recent_submissions: List[SubmissionRecord]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalSubmissions": self.total_submissions,
            "successfulSubmissions": self.successful_submissions,
            "failedSubmissions": self.failed_submissions,
            "averageItemsPerSubmission": self.average_items_per_submission,
            "mostFrequentItems": [item.to_dict() for item in self.most_frequent_items],
            "recentSubmissions": [record.to_dict() for record in self.recent_submissions],
        }
