"""
Submission recorder.

Persists one summary row per completed download/send attempt plus one row
per item with a positive count, and answers aggregate queries over the log.
Items at 0 are never stored, so the log grows with activity rather than
with catalog size.

The recorder does not own the database: an AnalyticsDatabase is built and
closed by the application and injected here.

Failure Semantics:
    record_submission() raises RecordingError when the write fails. Callers
    on the download/send path (SubmissionWorkflow) catch and log it; a
    recording failure never aborts the user-facing flow.
"""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from core import constants
from core.analytics_db import AnalyticsDatabase
from core.exceptions import InvalidChannelError, RecordingError
from models.submission import (
    AnalyticsSummary,
    ChannelStats,
    ItemFrequency,
    SubmissionChannel,
    SubmissionItem,
    SubmissionRecord,
)
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

# Stays well under SQLITE_MAX_VARIABLE_NUMBER (999 on older builds)
ITEM_QUERY_BATCH_SIZE = 500


def parse_channel(channel) -> SubmissionChannel:
    """
    Resolve a channel given as enum or string.

    Raises:
        InvalidChannelError: If the value is not a known channel
    """
    if isinstance(channel, SubmissionChannel):
        return channel
    try:
        return SubmissionChannel(channel)
    except ValueError:
        raise InvalidChannelError(str(channel), SubmissionChannel.values()) from None


class SubmissionRecorder:
    """
    Append-only submission log with read-only analytics queries.

    Attributes:
        database: The injected AnalyticsDatabase
    """

    def __init__(self, database: AnalyticsDatabase):
        self.database = database

    def record_submission(
        self,
        counts: Mapping[str, int],
        channel,
        channel_success: bool = True,
        customer_reference: Optional[str] = None,
        scenario: Optional[str] = None,
    ) -> int:
        """
        Record one submission and its non-zero items atomically.

        Args:
            counts: Item name -> count snapshot
            channel: SubmissionChannel or its string value
            channel_success: Whether the delivery succeeded
            customer_reference: Optional free-text reference
            scenario: Optional free-text scenario tag

        Returns:
            The new submission id

        Raises:
            InvalidChannelError: If channel is not a known channel
            RecordingError: If the database write fails
        """
        resolved = parse_channel(channel)
        items_with_values = [(name, count) for name, count in counts.items() if count > 0]

        try:
            with self.database.transaction() as connection:
                cursor = connection.execute(
                    """
                    INSERT INTO submissions
                        (channel, customer_reference, scenario, total_items,
                         items_with_values, channel_success)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        resolved.value,
                        customer_reference,
                        scenario,
                        len(counts),
                        len(items_with_values),
                        1 if channel_success else 0,
                    ),
                )
                submission_id = cursor.lastrowid
                connection.executemany(
                    "INSERT INTO submission_items (submission_id, item_name, count) VALUES (?, ?, ?)",
                    [(submission_id, name, int(count)) for name, count in items_with_values],
                )
        except sqlite3.Error as e:
            logger.error(f"Failed to record {resolved.value} submission: {e}")
            raise RecordingError(f"Failed to record submission: {e}", resolved.value) from e

        logger.info(
            f"Recorded submission {submission_id}: channel={resolved.value}, "
            f"success={channel_success}, items_with_values={len(items_with_values)}"
        )
        return submission_id

    # =========================================================================
    # QUERIES (read-only)
    # =========================================================================

    def get_submission(self, submission_id: int) -> Optional[SubmissionRecord]:
        """Fetch one submission with its items, or None."""
        rows = self.database.query("SELECT * FROM submissions WHERE id = ?", (submission_id,))
        if not rows:
            return None
        return self._with_items(rows)[0]

    def get_recent_submissions(self, limit: int = constants.DEFAULT_QUERY_LIMIT) -> List[SubmissionRecord]:
        """Most recent submissions first."""
        rows = self.database.query(
            "SELECT * FROM submissions ORDER BY timestamp DESC, id DESC LIMIT ?",
            (limit,),
        )
        return self._with_items(rows)

    def get_submissions_by_channel(
        self,
        channel,
        limit: int = constants.DEFAULT_QUERY_LIMIT,
    ) -> List[SubmissionRecord]:
        """Most recent submissions for one channel."""
        resolved = parse_channel(channel)
        rows = self.database.query(
            """
            SELECT * FROM submissions
            WHERE channel = ?
            ORDER BY timestamp DESC, id DESC
            LIMIT ?
            """,
            (resolved.value, limit),
        )
        return self._with_items(rows)

    def get_submissions_by_date_range(self, start: str, end: str) -> List[SubmissionRecord]:
        """
        Submissions whose timestamp falls within [start, end].

        Timestamps are local-time text ("YYYY-MM-DD HH:MM:SS"), so bounds
        compare lexically; a bare date as end excludes that day's times.
        """
        rows = self.database.query(
            """
            SELECT * FROM submissions
            WHERE timestamp >= ? AND timestamp <= ?
            ORDER BY timestamp DESC, id DESC
            """,
            (start, end),
        )
        return self._with_items(rows)

    def get_channel_stats(self) -> List[ChannelStats]:
        """Submission count and success rate per channel, busiest first."""
        rows = self.database.query(
            """
            SELECT
                channel,
                COUNT(*) AS count,
                ROUND(AVG(channel_success) * 100, 1) AS success_rate
            FROM submissions
            GROUP BY channel
            ORDER BY count DESC
            """
        )
        return [
            ChannelStats(row["channel"], row["count"], float(row["success_rate"] or 0.0))
            for row in rows
        ]

    def get_summary(self) -> AnalyticsSummary:
        """Totals, average items per submission, top items and recent records."""
        totals = self.database.query(
            """
            SELECT
                COUNT(*) AS total,
                SUM(CASE WHEN channel_success = 1 THEN 1 ELSE 0 END) AS successful,
                SUM(CASE WHEN channel_success = 0 THEN 1 ELSE 0 END) AS failed,
                AVG(items_with_values) AS avg_items
            FROM submissions
            """
        )[0]

        frequent = self.database.query(
            """
            SELECT
                item_name AS name,
                SUM(count) AS total_count,
                COUNT(*) AS frequency
            FROM submission_items
            GROUP BY item_name
            ORDER BY frequency DESC, total_count DESC
            LIMIT ?
            """,
            (constants.SUMMARY_TOP_ITEMS,),
        )

        return AnalyticsSummary(
            total_submissions=totals["total"] or 0,
            successful_submissions=totals["successful"] or 0,
            failed_submissions=totals["failed"] or 0,
            average_items_per_submission=round(totals["avg_items"] or 0.0, 1),
            most_frequent_items=[
                ItemFrequency(row["name"], row["total_count"], row["frequency"])
                for row in frequent
            ],
            recent_submissions=self.get_recent_submissions(constants.SUMMARY_RECENT_SUBMISSIONS),
        )

    def export_to_json(self) -> str:
        """Every submission with its items as a pretty-printed JSON array."""
        rows = self.database.query("SELECT * FROM submissions ORDER BY timestamp DESC, id DESC")
        records = self._with_items(rows)
        return json.dumps([record.to_dict() for record in records], indent=2)

    def _with_items(self, rows) -> List[SubmissionRecord]:
        if not rows:
            return []

        ids = [row["id"] for row in rows]
        items_by_submission: Dict[int, List[SubmissionItem]] = {}
        for start in range(0, len(ids), ITEM_QUERY_BATCH_SIZE):
            batch = ids[start:start + ITEM_QUERY_BATCH_SIZE]
            placeholders = ", ".join("?" for _ in batch)
            item_rows = self.database.query(
                f"""
                SELECT submission_id, item_name, count FROM submission_items
                WHERE submission_id IN ({placeholders})
                ORDER BY id
                """,
                tuple(batch),
            )
            for item in item_rows:
                items_by_submission.setdefault(item["submission_id"], []).append(
                    SubmissionItem(item["item_name"], item["count"])
                )

        return [
            SubmissionRecord.from_row(row, items_by_submission.get(row["id"], []))
            for row in rows
        ]


def create_submission_recorder(db_path: str | Path) -> SubmissionRecorder:
    """Open the analytics database at db_path and wrap it in a recorder."""
    database = AnalyticsDatabase(db_path)
    database.initialize()
    return SubmissionRecorder(database)
