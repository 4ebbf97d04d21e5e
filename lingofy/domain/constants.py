"""
Domain Constants: studio-wide fixed values.

Image intake policy, default messages and prompt wording shared by the
studio session, the routes and the providers.
"""

# =============================================================================
# Image Intake Policy
# =============================================================================
# Per-file limit and allowed types for the gallery uploader.
# default.yaml (images.*) may override both.

MAX_IMAGE_SIZE_BYTES = 5 * 1024 * 1024  # 5 MiB
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp")

# Generated images without a declared type
DEFAULT_GENERATED_MIME_TYPE = "image/png"

IMAGE_SOURCE_UPLOAD = "upload"
IMAGE_SOURCE_GENERATED = "generated"

# =============================================================================
# Save Messages
# =============================================================================

SAVE_DEFAULT_SUCCESS_MESSAGE = "Data saved successfully!"
SAVE_DEFAULT_FAILURE_MESSAGE = "Failed to save data."
SAVE_GENERIC_ERROR_MESSAGE = "An error occurred while saving. Please try again."

# =============================================================================
# Server
# =============================================================================

API_STATUS_MESSAGE = "🚀 Lingofy API is running!"
MAX_BODY_BYTES = 10 * 1024 * 1024  # base64 images inflate JSON bodies
DEFAULT_CORS_ORIGINS = ("http://localhost:5173",)
DEFAULT_PERSISTENCE_URL = "http://127.0.0.1:3001/api/v1/save"
DEFAULT_MAX_SESSIONS = 100  # in-memory editing sessions per process

# =============================================================================
# AI
# =============================================================================

DEFAULT_CHAT_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_AI_TIMEOUT = 60.0

CHAT_ROLES = ("user", "model")

CHAT_SYSTEM_INSTRUCTION = (
    "You are the Lingofy assistant. Lingofy helps independent creators run a "
    "multilingual storefront: editing their site and product details, "
    "preparing product images and reaching buyers worldwide. Answer briefly "
    "and practically."
)

IMAGE_PROMPT_TEMPLATE = (
    "Generate a high-quality, professional product photograph for e-commerce. "
    'The product is: "{title}". Description: "{description}". '
    "The image should be on a clean, minimalist background, suitable for a "
    "product listing."
)
IMAGE_PROMPT_EXTRA_TEMPLATE = ' Additional instructions from the creator: "{extra}".'
