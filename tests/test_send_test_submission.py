"""
Tests for the test-submission script.

The image generator is real (Pillow fixtures); the upload client and
recorder are mocks.
"""

import random

import pytest
from unittest.mock import Mock

from core.catalog import CATALOG, item_names
from models.results import UploadResult
from send_test_submission import build_counts, run_scenario
from services.image_generator import create_image_generator


@pytest.fixture
def generator(image_options):
    return create_image_generator(image_options)


@pytest.fixture
def client():
    mock_client = Mock()
    mock_client.upload_image.return_value = UploadResult.create_success(200, "msg-1")
    return mock_client


@pytest.fixture
def recorder():
    mock_recorder = Mock()
    mock_recorder.record_submission.return_value = 7
    return mock_recorder


class TestRunScenario:
    """Test one scenario run, with and without --dry-run."""

    def test_dry_run_writes_image_only(self, generator, client, recorder, tmp_path):
        result = run_scenario("sparse", generator, client, recorder, random.Random(1), True, tmp_path)

        assert result["success"] is True
        assert (tmp_path / result["filename"]).is_file()
        assert "submissionId" not in result
        client.upload_image.assert_not_called()
        recorder.record_submission.assert_not_called()

    def test_send_uploads_and_records(self, generator, client, recorder, tmp_path):
        result = run_scenario("all", generator, client, recorder, random.Random(1), False, tmp_path)

        assert result["submissionId"] == 7
        assert list(tmp_path.iterdir()) == []
        client.upload_image.assert_called_once()
        kwargs = recorder.record_submission.call_args.kwargs
        assert kwargs["channel"] == "discord"
        assert kwargs["channel_success"] is True
        assert kwargs["scenario"] == "all"


class TestBuildCounts:
    """Test scenario count generation."""

    def test_sparse_has_fewer_than_ten_items(self):
        counts = build_counts("sparse", random.Random(3))
        assert 0 < sum(1 for value in counts.values() if value > 0) < 10
        assert set(counts) == set(item_names(CATALOG))
