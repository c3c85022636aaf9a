"""
Application constants.

Pixel positions refer to the fixed laundry list template image.
"""

# Canvas rendering
FONT_SIZE = 32
FONT_FAMILY = "Arial"
TEXT_COLOR = "black"

DATE_POSITION = (250, 250)
SIGNATURE_POSITION = (735, 1098)
SIGNATURE_SCALE = 0.55
SIGNATURE_DATE_POSITION = (850, 1214)

# Image output (PNG is lossless, there is no quality knob)
IMAGE_FORMAT = "PNG"
IMAGE_MIME_TYPE = "image/png"
FILENAME_PREFIX = "laundry-output-"
FILENAME_EXTENSION = ".png"
FILENAME_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"

# Webhook upload
MAX_FILE_SIZE_BYTES = 8 * 1024 * 1024  # 8 MB, free tier attachment limit
DEFAULT_UPLOAD_MESSAGE = "Laundry submission"
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY_MS = 1000
DEFAULT_TIMEOUT_MS = 30000
WEBHOOK_HOST = "discord.com"
WEBHOOK_PATH_MARKER = "/api/webhooks/"
TIMEOUT_STATUS_CODE = 408
RESPONSE_CHUNK_SIZE = 8192

# Error messages
WEBHOOK_URL_NOT_SET = "DISCORD_WEBHOOK_URL is not set"
WEBHOOK_URL_INVALID = "Invalid Discord webhook URL format"
WEBHOOK_REQUEST_FAILED = "Discord webhook request failed"
UPLOAD_RETRIES_EXHAUSTED = "Upload failed after all retry attempts"
UPLOAD_TIMEOUT = "Request timeout"
IMAGE_GENERATION_FAILED = "Failed to generate PNG"

# Confirmation
RESET_CONFIRMATION_MESSAGE = (
    "Are you sure you want to reset all counts? This action cannot be undone."
)

# Analytics queries
DEFAULT_QUERY_LIMIT = 10
SUMMARY_TOP_ITEMS = 10
SUMMARY_RECENT_SUBMISSIONS = 5
