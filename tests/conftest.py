"""Shared fixtures: image assets built with Pillow and a test app."""

import atexit

import pytest
from PIL import Image

from services.image_generator import ImageGenerationOptions


TEMPLATE_SIZE = (1240, 1754)


@pytest.fixture
def asset_dir(tmp_path_factory):
    """Separate directory for image assets, so tmp_path stays empty."""
    return tmp_path_factory.mktemp("assets")


@pytest.fixture
def template_path(asset_dir):
    """A blank white template raster."""
    path = asset_dir / "template.png"
    Image.new("RGB", TEMPLATE_SIZE, "white").save(path)
    return str(path)


@pytest.fixture
def signature_path(asset_dir):
    """A semi-transparent signature overlay."""
    path = asset_dir / "signature.png"
    Image.new("RGBA", (200, 100), (0, 0, 255, 128)).save(path)
    return str(path)


@pytest.fixture
def image_options(template_path, signature_path):
    return ImageGenerationOptions(
        template_path=template_path,
        signature_path=signature_path,
    )


@pytest.fixture
def app(template_path, signature_path):
    """Flask app on TestingConfig: in-memory analytics, mock uploads."""
    from app import create_app
    from config import TestingConfig

    class Config(TestingConfig):
        TEMPLATE_IMAGE_PATH = template_path
        SIGNATURE_IMAGE_PATH = signature_path

    flask_app = create_app(Config)
    yield flask_app
    atexit.unregister(flask_app.config["SHUTDOWN_HOOK"])
    flask_app.config["ANALYTICS_DB"].close()


@pytest.fixture
def client(app):
    return app.test_client()
