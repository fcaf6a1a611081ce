"""Upload rules and presentation helpers for employer media."""

from __future__ import annotations

import math
from typing import Optional

from .exceptions import MediaValidationError

LOGO = "logo"
SFEERBEELD = "sfeerbeeld"
MEDIA_TYPES = (LOGO, SFEERBEELD)

MAX_LOGO_BYTES = 1 * 1024 * 1024
MAX_IMAGE_BYTES = 10 * 1024 * 1024

LOGO_CONTENT_TYPES = frozenset({"image/png", "image/svg+xml"})
IMAGE_CONTENT_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/webp",
        "image/avif",
        "image/svg+xml",
    }
)

_DISPLAY_FORMATS = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/webp": "WEBP",
    "image/avif": "AVIF",
    "image/svg+xml": "SVG",
}


def validate_media_type(media_type: Optional[str]) -> str:
    if media_type not in MEDIA_TYPES:
        raise MediaValidationError("Ongeldig type. Gebruik 'logo' of 'sfeerbeeld'")
    return media_type


def max_bytes_for(media_type: str) -> int:
    return MAX_LOGO_BYTES if media_type == LOGO else MAX_IMAGE_BYTES


def validate_content_type(media_type: str, content_type: Optional[str]) -> None:
    if media_type == LOGO:
        if content_type not in LOGO_CONTENT_TYPES:
            raise MediaValidationError(
                "Upload je logo als PNG of SVG bestand. Deze formaten behouden de kwaliteit "
                "en ondersteunen transparante achtergronden."
            )
    elif content_type not in IMAGE_CONTENT_TYPES:
        raise MediaValidationError("Alleen JPEG, PNG, WebP, AVIF of SVG afbeeldingen zijn toegestaan")


def size_limit_message(media_type: str) -> str:
    limit = "1MB" if media_type == LOGO else "10MB"
    return f"Afbeelding mag maximaal {limit} zijn"


def display_format(content_type: Optional[str], stored_format: Optional[str] = None) -> str:
    if content_type in _DISPLAY_FORMATS:
        return _DISPLAY_FORMATS[content_type]
    if stored_format:
        return stored_format.upper()
    return "IMG"


def format_file_size(num_bytes: int) -> str:
    """Human readable size, never below kilobytes."""
    if num_bytes <= 0:
        return "0 KB"
    kb = num_bytes / 1024
    if kb < 1:
        return "< 1 KB"
    units = ("KB", "MB", "GB")
    index = min(int(math.floor(math.log(kb, 1024))), len(units) - 1)
    return f"{round(kb / 1024 ** index)} {units[index]}"


def generate_alt_text(
    kind: str,
    company_name: str,
    *,
    sector: Optional[str] = None,
    location: Optional[str] = None,
    contact_name: Optional[str] = None,
    contact_role: Optional[str] = None,
) -> str:
    if kind == LOGO:
        return f"Logo van {company_name}"
    if kind == "header":
        parts = [f"Headerafbeelding van {company_name}"]
        parts.extend(part for part in (sector, location) if part)
        return " - ".join(parts)
    if kind == SFEERBEELD:
        if sector and location:
            return f"Werksfeer bij {company_name} - {sector} in {location}"
        if sector:
            return f"Werksfeer bij {company_name} - {sector}"
        if location:
            return f"Werksfeer bij {company_name} in {location}"
        return f"Werksfeer bij {company_name}"
    if kind == "contact":
        if contact_name and contact_role:
            return f"{contact_name}, {contact_role} bij {company_name}"
        if contact_name:
            return f"{contact_name} bij {company_name}"
        return f"Contactpersoon bij {company_name}"
    return company_name
