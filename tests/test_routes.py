"""
Route tests using the Flask test client.

The app runs on TestingConfig: in-memory analytics database, mock upload
backend, and Pillow-generated template/signature images.
"""

import atexit
import io
import json

import pytest
from unittest.mock import Mock
from PIL import Image

from core import constants
from core.catalog import CATALOG, item_names
from services.upload_client import MockUploadClient


def _post(client, url, **body):
    return client.post(url, json=body)


# Tests for the counter page

class TestIndex:
    """Test the counter page."""

    def test_renders_catalog(self, client):
        response = client.get("/")

        assert response.status_code == 200
        html = response.get_data(as_text=True)
        for category in CATALOG:
            assert category in html
        assert "Socks (per pc. not pair)" in html

    def test_shows_last_error(self, client, app):
        app.config["IMAGE_GENERATOR"].options.template_path = "/nonexistent/template.png"
        client.post("/download")

        html = client.get("/").get_data(as_text=True)
        assert "Failed to load image: /nonexistent/template.png" in html
        assert "Reload" in html


# Tests for the Count Store endpoints

class TestCounterEndpoints:
    """Test item, custom item and reset endpoints."""

    def test_update_persists_in_session(self, client):
        _post(client, "/api/items/update", name="Shoes", delta=2)
        response = _post(client, "/api/items/update", name="Shoes", delta=1)

        assert response.status_code == 200
        data = response.get_json()
        assert data["value"] == 3
        assert data["items"]["Shoes"] == 3
        assert set(data["items"]) == set(item_names(CATALOG))

    def test_update_clamps_at_zero(self, client):
        response = _post(client, "/api/items/update", name="Shoes", delta=-4)
        assert response.get_json()["value"] == 0

    def test_set_sanitizes(self, client):
        assert _post(client, "/api/items/set", name="Bags", value=5.7).get_json()["value"] == 5
        assert _post(client, "/api/items/set", name="Bags", value="abc").get_json()["value"] == 0

    def test_unknown_item_is_404(self, client):
        response = _post(client, "/api/items/update", name="Spaceship", delta=1)

        assert response.status_code == 404
        assert response.get_json()["error"] == "Unknown item: Spaceship"

    def test_missing_name_is_400(self, client):
        assert _post(client, "/api/items/set", value=1).status_code == 400

    def test_bad_delta_is_400(self, client):
        assert _post(client, "/api/items/update", name="Shoes", delta="lots").status_code == 400

    def test_custom_item_lifecycle(self, client):
        added = _post(client, "/api/custom-items", name="  <b>Pet bed</b> ")
        assert added.get_json()["added"] == "Pet bed"
        assert added.get_json()["customItems"] == {"Pet bed": 0}

        updated = _post(client, "/api/items/update", name="Pet bed", delta=2, custom=True)
        assert updated.get_json()["customItems"] == {"Pet bed": 2}

        removed = _post(client, "/api/custom-items/remove", name="Pet bed")
        assert removed.get_json()["customItems"] == {}

    def test_custom_update_sanitizes_name(self, client):
        _post(client, "/api/items/set", name="  Socks  ", value=3, custom=True)
        response = _post(client, "/api/items/update", name="<b>Socks</b>", delta=1, custom=True)

        assert response.status_code == 200
        assert response.get_json()["name"] == "Socks"
        assert response.get_json()["customItems"] == {"Socks": 4}

    @pytest.mark.parametrize("url", ["/api/items/update", "/api/items/set"])
    def test_blank_custom_name_is_400(self, client, url):
        response = _post(client, url, name="   ", delta=1, value=1, custom=True)

        assert response.status_code == 400
        assert client.post("/api/reset", json={"confirm": "no"}).get_json()["customItems"] == {}

    def test_empty_custom_name_is_ignored(self, client):
        response = _post(client, "/api/custom-items", name="   ")
        assert response.get_json()["added"] is None
        assert response.get_json()["customItems"] == {}

    def test_reset_requires_confirmation(self, client):
        _post(client, "/api/items/set", name="Shoes", value=4)
        _post(client, "/api/custom-items", name="Rug")

        declined = _post(client, "/api/reset", confirm="no")
        assert declined.get_json()["reset"] is False
        assert declined.get_json()["items"]["Shoes"] == 4

        accepted = _post(client, "/api/reset", confirm="yes")
        assert accepted.get_json()["reset"] is True
        assert accepted.get_json()["items"]["Shoes"] == 0
        assert accepted.get_json()["customItems"] == {}

    def test_form_post_redirects_to_index(self, client):
        response = client.post("/api/items/update", data={"name": "Shoes", "delta": "1"})

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/")


# Tests for download and send

class TestActions:
    """Test download and send."""

    def test_download_returns_png_attachment(self, client):
        _post(client, "/api/items/set", name="Shoes", value=3)
        response = client.post("/download")

        assert response.status_code == 200
        assert response.mimetype == constants.IMAGE_MIME_TYPE
        disposition = response.headers["Content-Disposition"]
        assert "attachment" in disposition
        assert "laundry-output-" in disposition
        with Image.open(io.BytesIO(response.data)) as image:
            assert image.format == "PNG"

    def test_download_records_submission(self, client, app):
        client.post("/download")

        records = app.config["SUBMISSION_RECORDER"].get_recent_submissions()
        assert len(records) == 1
        assert records[0].channel == "download"
        assert records[0].channel_success is True

    def test_download_failure_is_500(self, client, app):
        app.config["IMAGE_GENERATOR"].options.template_path = "/nonexistent/template.png"
        response = client.post("/download", json={})

        assert response.status_code == 500
        assert "Failed to load image" in response.get_json()["error"]
        assert app.config["SUBMISSION_RECORDER"].get_recent_submissions() == []

    def test_send_success(self, client, app):
        response = client.post("/send", json={"message": "Room 12"})

        assert response.status_code == 200
        assert response.get_json() == {
            "success": True,
            "messageId": "mock-message-id",
            "statusCode": 200,
        }
        upload_client = app.config["UPLOAD_CLIENT"]
        assert isinstance(upload_client, MockUploadClient)
        assert upload_client.uploads[0]["message"] == "Room 12"

        record = app.config["SUBMISSION_RECORDER"].get_recent_submissions()[0]
        assert record.channel == "discord"
        assert record.channel_success is True

    def test_send_failure_is_502_and_recorded(self, client, app):
        app.config["UPLOAD_CLIENT"].should_succeed = False
        response = client.post("/send", json={})

        assert response.status_code == 502
        assert response.get_json()["error"] == "Mock upload failure"

        record = app.config["SUBMISSION_RECORDER"].get_recent_submissions()[0]
        assert record.channel_success is False

        html = client.get("/").get_data(as_text=True)
        assert "Mock upload failure" in html

    def test_successful_action_clears_error(self, client, app):
        app.config["UPLOAD_CLIENT"].should_succeed = False
        client.post("/send", json={})
        app.config["UPLOAD_CLIENT"].should_succeed = True
        client.post("/send", json={})

        assert "Mock upload failure" not in client.get("/").get_data(as_text=True)


# Tests for the submission log API

class TestSubmissionsApi:
    """Test /api/submissions endpoints."""

    def test_record_and_fetch(self, client):
        response = _post(
            client, "/api/submissions",
            counts={"Shoes": 2, "Bags": 0},
            channel="whatsapp",
            customerReference="Room 7",
        )
        assert response.status_code == 200
        submission_id = response.get_json()["submissionId"]

        record = client.get(f"/api/submissions/{submission_id}").get_json()
        assert record["channel"] == "whatsapp"
        assert record["customer_reference"] == "Room 7"
        assert record["items_with_values"] == 1
        assert record["items"] == [{"name": "Shoes", "count": 2}]

    @pytest.mark.parametrize("flag, expected", [("false", False), ("0", False), ("true", True), (1, True)])
    def test_channel_success_string_flags(self, client, flag, expected):
        response = _post(client, "/api/submissions", counts={"Shoes": 1}, channel="viber", channelSuccess=flag)
        submission_id = response.get_json()["submissionId"]

        record = client.get(f"/api/submissions/{submission_id}").get_json()
        assert record["channel_success"] is expected

    def test_invalid_channel_is_400(self, client):
        response = _post(client, "/api/submissions", counts={"Shoes": 1}, channel="fax")

        assert response.status_code == 400
        data = response.get_json()
        assert data["error"].startswith("Invalid channel. Must be one of:")
        assert data["validChannels"] == ["download", "discord", "whatsapp", "viber", "messenger"]

    def test_missing_fields_are_400(self, client):
        assert _post(client, "/api/submissions", channel="download").status_code == 400
        assert _post(client, "/api/submissions", counts={"Shoes": 1}).status_code == 400

    def test_missing_submission_is_404(self, client):
        assert client.get("/api/submissions/999").status_code == 404

    def test_recent_summary_and_stats(self, client):
        _post(client, "/api/submissions", counts={"Shoes": 2}, channel="download")
        _post(client, "/api/submissions", counts={"Shoes": 1}, channel="viber", channelSuccess=False)

        recent = client.get("/api/submissions?limit=1").get_json()
        assert len(recent) == 1
        assert recent[0]["channel"] == "viber"

        by_channel = client.get("/api/submissions?channel=download").get_json()
        assert [entry["channel"] for entry in by_channel] == ["download"]

        summary = client.get("/api/submissions?type=summary").get_json()
        assert summary["totalSubmissions"] == 2
        assert summary["failedSubmissions"] == 1
        assert summary["mostFrequentItems"][0] == {"name": "Shoes", "totalCount": 3, "frequency": 2}

        stats = client.get("/api/submissions?type=channel-stats").get_json()
        assert {entry["channel"] for entry in stats} == {"download", "viber"}

    def test_query_validation(self, client):
        assert client.get("/api/submissions?type=weekly").status_code == 400
        assert client.get("/api/submissions?limit=ten").status_code == 400
        assert client.get("/api/submissions?channel=fax").status_code == 400

    def test_range(self, client):
        _post(client, "/api/submissions", counts={"Shoes": 2}, channel="download")

        assert client.get("/api/submissions/range?start=2000-01-01").status_code == 400
        found = client.get(
            "/api/submissions/range",
            query_string={"start": "2000-01-01 00:00:00", "end": "2999-12-31 23:59:59"},
        ).get_json()
        assert len(found) == 1

    def test_export(self, client):
        _post(client, "/api/submissions", counts={"Shoes": 2}, channel="messenger")

        response = client.get("/api/submissions/export")
        assert response.status_code == 200
        assert "attachment" in response.headers["Content-Disposition"]
        exported = json.loads(response.get_data(as_text=True))
        assert exported[0]["channel"] == "messenger"


# Tests for health and client configuration

class TestApi:
    """Test /health and /api/config."""

    def test_health_ok(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "ok"
        assert data["checks"] == {"database": "initialized", "upload": "ok", "image": "ok"}

    def test_health_degraded_without_database(self, client, app):
        app.config["ANALYTICS_DB"].close()
        response = client.get("/health")

        assert response.status_code == 503
        assert response.get_json()["checks"]["database"] == "not_initialized"

    def test_config(self, client):
        data = client.get("/api/config").get_json()

        assert data == {
            "discordEnabled": True,
            "maxFileSize": 8 * 1024 * 1024,
            "allowedFileTypes": ["image/png"],
            "version": "1.0.0",
        }

    def test_catalog(self, client):
        data = client.get("/api/catalog").get_json()

        assert set(data) == set(CATALOG)
        assert len(data["Regular Laundry"]) == 23
        assert data["Regular Laundry"][0] == {"name": "Barongs", "x": 150, "y": 540, "group": "uppers"}
        assert "group" not in data["Other Items"][0]

    def test_config_without_webhook(self, template_path, signature_path):
        from app import create_app
        from config import TestingConfig

        class Config(TestingConfig):
            UPLOAD_BACKEND = "http"
            DISCORD_WEBHOOK_URL = ""
            TEMPLATE_IMAGE_PATH = template_path
            SIGNATURE_IMAGE_PATH = signature_path

        app = create_app(Config)
        try:
            client = app.test_client()
            assert client.get("/api/config").get_json()["discordEnabled"] is False

            response = client.post("/send", json={})
            assert response.status_code == 502
            assert response.get_json()["error"] == constants.WEBHOOK_URL_NOT_SET
        finally:
            atexit.unregister(app.config["SHUTDOWN_HOOK"])
            app.config["ANALYTICS_DB"].close()

    def test_unknown_route_is_json_404(self, client):
        response = client.get("/no/such/page")
        assert response.status_code == 404
        assert response.get_json() == {"error": "Not found"}


# Tests for shutdown cleanup

class TestShutdown:
    """Test the atexit cleanup registered by create_app."""

    def test_cleanup_is_registered(self, template_path, signature_path, monkeypatch):
        import app as app_module
        from config import TestingConfig

        class Config(TestingConfig):
            TEMPLATE_IMAGE_PATH = template_path
            SIGNATURE_IMAGE_PATH = signature_path

        register = Mock()
        monkeypatch.setattr(app_module.atexit, "register", register)

        flask_app = app_module.create_app(Config)

        register.assert_called_once_with(flask_app.config["SHUTDOWN_HOOK"])
        flask_app.config["SHUTDOWN_HOOK"]()
        assert flask_app.config["ANALYTICS_DB"].is_initialized is False

    def test_cleanup_after_close_is_silent(self, app, monkeypatch):
        import app as app_module

        app.config["ANALYTICS_DB"].close()
        logger = Mock()
        monkeypatch.setattr(app_module, "logger", logger)

        app.config["SHUTDOWN_HOOK"]()

        logger.info.assert_not_called()
