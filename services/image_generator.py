"""
Image composition service.

Draws the current date, every positive item count, and the signature
overlay onto a copy of the fixed laundry list template, and encodes the
result as PNG.

Failure Handling:
    - Template load, surface allocation or encoding failure -> failed result
    - Signature load failure -> warning logged, image still returned

Usage:
    generator = create_image_generator(ImageGenerationOptions(
        template_path="static/template.jpg",
        signature_path="static/signature_bo.png",
    ))

    result = generator.generate_image(store.all_counts(), CATALOG)
    if result.success:
        send_file(io.BytesIO(result.image), download_name=result.filename)
"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from numbers import Real
from typing import Callable, List, Mapping, Optional

from PIL import Image, ImageDraw, ImageFont

from core import constants
from core.catalog import Catalog, iter_items
from models.results import ImageGenerationResult
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


@dataclass
class ImageGenerationOptions:
    """Asset paths and text settings for the compositor."""

    template_path: str = "static/template.jpg"
    signature_path: str = "static/signature_bo.png"
    font_size: int = constants.FONT_SIZE
    font_family: str = constants.FONT_FAMILY
    text_color: str = constants.TEXT_COLOR
    font_path: Optional[str] = None
    """Explicit TrueType file; overrides font_family lookup."""


def format_display_date(moment: datetime) -> str:
    """Short US-style date, e.g. 3/7/2026."""
    return f"{moment.month}/{moment.day}/{moment.year}"


def build_filename(moment: datetime) -> str:
    """laundry-output-YYYYMMDDHHMMSS.png for the given local time."""
    timestamp = moment.strftime(constants.FILENAME_TIMESTAMP_FORMAT)
    return f"{constants.FILENAME_PREFIX}{timestamp}{constants.FILENAME_EXTENSION}"


class ImageGenerator(ABC):
    """Contract for anything that renders counts onto the template."""

    @abstractmethod
    def generate_image(
        self,
        counts: Mapping[str, int],
        catalog: Catalog,
    ) -> ImageGenerationResult:
        """Render counts and return the encoded image (never raises)."""

    @abstractmethod
    def validate_configuration(self) -> List[str]:
        """Return human-readable configuration errors (empty when valid)."""


class PillowImageGenerator(ImageGenerator):
    """Renders onto the template raster with Pillow."""

    def __init__(
        self,
        options: Optional[ImageGenerationOptions] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.options = options or ImageGenerationOptions()
        self._clock = clock

    def generate_image(
        self,
        counts: Mapping[str, int],
        catalog: Catalog,
    ) -> ImageGenerationResult:
        now = self._clock()

        try:
            template = self._load_image(self.options.template_path, mode="RGB")
        except (OSError, ValueError) as e:
            logger.error(f"Template load failed: {e}")
            return ImageGenerationResult.create_failed(
                f"Failed to load image: {self.options.template_path}"
            )

        try:
            surface = Image.new("RGB", template.size, "white")
            surface.paste(template, (0, 0))
            draw = ImageDraw.Draw(surface)
            font = self._load_font()

            today = format_display_date(now)
            self._draw_text(draw, constants.DATE_POSITION, today, font)

            drawn = self._draw_item_counts(draw, counts, catalog, font)
            logger.debug(f"Drew {drawn} item counts")

            self._draw_signature(surface)
            self._draw_text(draw, constants.SIGNATURE_DATE_POSITION, today, font)

            buffer = io.BytesIO()
            surface.save(buffer, format=constants.IMAGE_FORMAT)
            image_bytes = buffer.getvalue()
        except Exception as e:
            logger.error(f"Image generation failed: {e}", exc_info=True)
            return ImageGenerationResult.create_failed(
                str(e) or constants.IMAGE_GENERATION_FAILED
            )

        filename = build_filename(now)
        logger.info(f"Generated {filename} ({len(image_bytes)} bytes)")
        return ImageGenerationResult.create_success(image_bytes, filename)

    def validate_configuration(self) -> List[str]:
        errors: List[str] = []

        if not self.options.template_path:
            errors.append("Template path is required")

        if not self.options.signature_path:
            errors.append("Signature path is required")

        if not self.options.font_size or self.options.font_size <= 0:
            errors.append("Font size must be positive")

        if not self.options.font_family:
            errors.append("Font family is required")

        return errors

    def _draw_item_counts(self, draw, counts, catalog, font) -> int:
        drawn = 0
        for item in iter_items(catalog):
            count = counts.get(item.name, 0)
            # Non-positive and non-numeric values are skipped, not rendered
            if isinstance(count, bool) or not isinstance(count, Real) or not count > 0:
                continue
            self._draw_text(draw, (item.x, item.y), str(count), font)
            drawn += 1
        return drawn

    def _draw_signature(self, surface: Image.Image) -> None:
        try:
            signature = self._load_image(self.options.signature_path, mode="RGBA")
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load signature image: {e}")
            return

        scale = constants.SIGNATURE_SCALE
        size = (
            max(1, round(signature.width * scale)),
            max(1, round(signature.height * scale)),
        )
        scaled = signature.resize(size)
        surface.paste(scaled, constants.SIGNATURE_POSITION, scaled)

    def _draw_text(self, draw, position, text: str, font) -> None:
        x, y = position
        fill = self.options.text_color or constants.TEXT_COLOR
        if isinstance(font, ImageFont.FreeTypeFont):
            # y is the text baseline
            draw.text((x, y), text, fill=fill, font=font, anchor="ls")
        else:
            draw.text((x, y - self.options.font_size), text, fill=fill, font=font)

    def _load_font(self):
        size = self.options.font_size or constants.FONT_SIZE
        source = self.options.font_path or f"{self.options.font_family or constants.FONT_FAMILY}.ttf"
        try:
            return ImageFont.truetype(source, size)
        except OSError:
            logger.debug(f"Font {source} not found, using default font")
            return ImageFont.load_default(size=size)

    @staticmethod
    def _load_image(path: str, mode: str) -> Image.Image:
        if not path:
            raise ValueError("Image path is empty")
        with Image.open(path) as image:
            image.load()
            return image.convert(mode)


def create_image_generator(
    options: Optional[ImageGenerationOptions] = None,
) -> ImageGenerator:
    """Factory for the image generator."""
    return PillowImageGenerator(options)
