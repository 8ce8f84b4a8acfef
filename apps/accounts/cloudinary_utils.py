"""
Cloudinary integration utilities.

Provides a single ``upload_image`` helper that handles configuration,
validation and error handling so the registration view stays thin and
the integration is easily testable.
"""

import logging

from django.conf import settings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
ALLOWED_IMAGE_TYPES = frozenset([
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
])
MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5 MB

AVATAR_FOLDER = "avatars"
COVER_IMAGE_FOLDER = "covers"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class ImageValidationError(Exception):
    """Raised when an uploaded file fails pre-upload checks."""


def validate_image(image_file):
    """
    Validate an ``UploadedFile`` before sending it to Cloudinary.

    Raises
    ------
    ImageValidationError
        If content type or size is unacceptable.
    """
    if image_file.content_type not in ALLOWED_IMAGE_TYPES:
        allowed = ", ".join(sorted(ALLOWED_IMAGE_TYPES))
        raise ImageValidationError(
            f"Unsupported file type '{image_file.content_type}'. "
            f"Allowed: {allowed}"
        )

    if image_file.size > MAX_IMAGE_SIZE:
        mb = MAX_IMAGE_SIZE // (1024 * 1024)
        raise ImageValidationError(
            f"Image file size ({image_file.size:,} bytes) exceeds "
            f"the {mb} MB limit."
        )


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------

def _configure_cloudinary():
    """
    Ensure the ``cloudinary`` library is configured from Django settings.

    Called once per upload rather than at module level so that tests can
    override settings freely.
    """
    import cloudinary

    cloudinary.config(
        cloud_name=getattr(settings, "CLOUDINARY_CLOUD_NAME", ""),
        api_key=getattr(settings, "CLOUDINARY_API_KEY", ""),
        api_secret=getattr(settings, "CLOUDINARY_API_SECRET", ""),
        secure=True,
    )


def upload_image(image_file, *, folder):
    """
    Upload an image to Cloudinary under ``<CLOUDINARY_FOLDER>/<folder>``.

    Parameters
    ----------
    image_file : django.core.files.uploadedfile.UploadedFile
        The raw file from ``request.FILES``.
    folder : str
        Sub-folder for this kind of image (``AVATAR_FOLDER`` or
        ``COVER_IMAGE_FOLDER``).

    Returns
    -------
    str
        The HTTPS URL of the uploaded image.

    Raises
    ------
    ImageValidationError
        If the file fails type/size checks.
    RuntimeError
        If the Cloudinary upload itself fails or returns no URL.
    """
    validate_image(image_file)
    _configure_cloudinary()

    import cloudinary.uploader

    root = getattr(settings, "CLOUDINARY_FOLDER", "")
    upload_kwargs = {
        "folder": f"{root}/{folder}" if root else folder,
        "resource_type": "image",
    }

    try:
        result = cloudinary.uploader.upload(image_file, **upload_kwargs)
    except Exception as exc:
        logger.error("Cloudinary upload failed: %s", exc)
        raise RuntimeError("Image upload to Cloudinary failed.") from exc

    url = (result or {}).get("secure_url") or (result or {}).get("url")
    if not url:
        logger.error("Cloudinary upload returned no URL: %r", result)
        raise RuntimeError("Image upload to Cloudinary returned no URL.")

    logger.info("Cloudinary upload succeeded: %s", url)
    return url
