"""
Submission log routes.

Handles:
- GET /api/submissions - Recent submissions, summary or channel stats
- POST /api/submissions - Record a submission from an external client
- GET /api/submissions/<id> - One submission with its items
- GET /api/submissions/range - Submissions between two timestamps
- GET /api/submissions/export - Full log as a JSON download
"""

from flask import Blueprint, Response, current_app, jsonify, request

from core import constants
from core.exceptions import InvalidChannelError, RecordingError
from models.counts import sanitize_count
from models.submission import SubmissionChannel
from routes.context import parse_flag
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

submissions_bp = Blueprint("submissions", __name__)

EXPORT_FILENAME = "laundry-submissions.json"


def _get_recorder():
    return current_app.config.get("SUBMISSION_RECORDER")


def _recorder_unavailable():
    return jsonify({"error": "Submission log unavailable"}), 503


def _parse_limit():
    """Read ?limit= (default 10); returns (limit, error_response)."""
    raw = request.args.get("limit")
    if raw is None:
        return constants.DEFAULT_QUERY_LIMIT, None
    try:
        limit = int(raw)
    except ValueError:
        return None, (jsonify({"error": "'limit' must be a whole number"}), 400)
    if limit < 1:
        return None, (jsonify({"error": "'limit' must be positive"}), 400)
    return limit, None


@submissions_bp.route("/api/submissions", methods=["GET"])
def list_submissions():
    """
    Query the submission log.

    ?type=summary returns the analytics summary, ?type=channel-stats the
    per-channel stats; otherwise the most recent submissions (optionally
    filtered by ?channel=).
    """
    recorder = _get_recorder()
    if recorder is None:
        return _recorder_unavailable()

    query_type = request.args.get("type", "recent")

    if query_type == "summary":
        return jsonify(recorder.get_summary().to_dict())

    if query_type == "channel-stats":
        return jsonify([stats.to_dict() for stats in recorder.get_channel_stats()])

    if query_type != "recent":
        return jsonify({"error": f"Unknown query type: {query_type}"}), 400

    limit, error = _parse_limit()
    if error:
        return error

    channel = request.args.get("channel")
    try:
        if channel:
            records = recorder.get_submissions_by_channel(channel, limit)
        else:
            records = recorder.get_recent_submissions(limit)
    except InvalidChannelError as e:
        return jsonify({"error": e.message}), 400

    return jsonify([record.to_dict() for record in records])


@submissions_bp.route("/api/submissions", methods=["POST"])
def record_submission():
    """Record a submission sent by a client (e.g. a messaging share)."""
    recorder = _get_recorder()
    if recorder is None:
        return _recorder_unavailable()

    body = request.get_json(silent=True) or {}

    counts = body.get("counts")
    if not isinstance(counts, dict):
        return jsonify({"error": "Missing or invalid 'counts' field"}), 400

    channel = body.get("channel")
    if not channel:
        return jsonify({"error": "Missing 'channel' field"}), 400

    channel_success = parse_flag(body.get("channelSuccess", True))

    try:
        submission_id = recorder.record_submission(
            {str(name): sanitize_count(value) for name, value in counts.items()},
            channel=channel,
            channel_success=channel_success,
            customer_reference=body.get("customerReference"),
            scenario=body.get("scenario"),
        )
    except InvalidChannelError as e:
        return jsonify({
            "error": e.message,
            "validChannels": SubmissionChannel.values(),
        }), 400
    except RecordingError as e:
        logger.error(f"Failed to record submission: {e}")
        return jsonify({"error": "Failed to record submission"}), 500

    return jsonify({"ok": True, "submissionId": submission_id})


@submissions_bp.route("/api/submissions/<int:submission_id>", methods=["GET"])
def get_submission(submission_id: int):
    recorder = _get_recorder()
    if recorder is None:
        return _recorder_unavailable()

    record = recorder.get_submission(submission_id)
    if record is None:
        return jsonify({"error": f"Submission {submission_id} not found"}), 404
    return jsonify(record.to_dict())


@submissions_bp.route("/api/submissions/range", methods=["GET"])
def submissions_in_range():
    """Submissions with start <= timestamp <= end ("YYYY-MM-DD HH:MM:SS")."""
    recorder = _get_recorder()
    if recorder is None:
        return _recorder_unavailable()

    start = request.args.get("start")
    end = request.args.get("end")
    if not start or not end:
        return jsonify({"error": "Both 'start' and 'end' are required"}), 400

    records = recorder.get_submissions_by_date_range(start, end)
    return jsonify([record.to_dict() for record in records])


@submissions_bp.route("/api/submissions/export", methods=["GET"])
def export_submissions():
    recorder = _get_recorder()
    if recorder is None:
        return _recorder_unavailable()

    return Response(
        recorder.export_to_json(),
        mimetype="application/json",
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
    )
