"""Safe download filenames for exported prompts."""
import re

from promptstudio.utils.constants import FILENAME_EXTENSION_LENGTH, MAX_FILENAME_LENGTH

DEFAULT_FILENAME = "prompt"


def sanitize_filename(title: str) -> str:
    """
    Turn a prompt title into a filesystem-safe base name.

    Non-alphanumerics become underscores, runs of underscores collapse,
    leading/trailing underscores are stripped and the result is truncated
    so an extension still fits.
    """
    sanitized = re.sub(r"[^a-z0-9]", "_", title or "", flags=re.IGNORECASE).lower()
    sanitized = sanitized.strip("_")
    sanitized = re.sub(r"_+", "_", sanitized)

    if not sanitized:
        sanitized = DEFAULT_FILENAME

    max_base = MAX_FILENAME_LENGTH - FILENAME_EXTENSION_LENGTH
    if len(sanitized) > max_base:
        sanitized = sanitized[:max_base].rstrip("_")

    return sanitized


def create_filename(title: str, extension: str) -> str:
    ext = extension if extension.startswith(".") else f".{extension}"
    return f"{sanitize_filename(title)}{ext}"
