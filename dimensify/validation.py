import re

from dimensify.errors import (
    InvalidDimensions, InvalidFormat, InvalidQuality, MissingFile, UnsupportedType
)
from dimensify.models import ALLOWED_TYPES, SUPPORTED_FORMATS, ResizeRequest

LEADING_INT_RE = re.compile(r'\s*([+-]?[0-9]+)')


def parse_int(value):
    """Read the leading integer of a form field, so '12.5' and '12px' give 12.

    Returns None when the field is missing or does not start with digits.
    """
    if value is None:
        return None
    match = LEADING_INT_RE.match(value)
    if match is None:
        return None
    return int(match.group(1))


def parse_resize_request(files, form):
    """Validate a multipart resize submission.

    Checks run in a fixed order and the first failure is raised, so a request
    with several problems always reports the same one.
    """
    image = files.get('image')
    if image is None or not image.filename:
        raise MissingFile()

    if image.mimetype not in ALLOWED_TYPES:
        raise UnsupportedType()

    width = parse_int(form.get('width'))
    height = parse_int(form.get('height'))
    if width is None or height is None or width <= 0 or height <= 0:
        raise InvalidDimensions()

    format = (form.get('format') or '').strip()
    if format not in SUPPORTED_FORMATS:
        raise InvalidFormat()

    quality = parse_int(form.get('quality'))
    if quality is None or quality < 1 or quality > 100:
        raise InvalidQuality()

    return ResizeRequest(
        image_data=image.read(),
        content_type=image.mimetype,
        width=width,
        height=height,
        format=format,
        quality=quality,
    )
