from datetime import datetime, timezone

from werkzeug.exceptions import BadRequest
from werkzeug.routing import BaseConverter


def utc_now():
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value):
    """Normalize an aware datetime to naive UTC; naive values are assumed UTC."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def isoformat(value):
    return value.isoformat() if value else None


class IdConverter(BaseConverter):
    """
    URL converter for numeric identifiers.

    Unlike the built-in ``int`` converter, a malformed segment is answered
    with 400 instead of falling through to a 404.
    """
    regex = r'[^/]+'
    part_isolating = True

    def to_python(self, value):
        if not (value.isascii() and value.isdigit()) or int(value) < 1:
            raise BadRequest(f'Invalid ID: {value}')
        return int(value)

    def to_url(self, value):
        return str(int(value))
