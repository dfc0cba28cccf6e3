from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any
from urllib.parse import quote

from ..errors import SwiftHeaderError

# Format of the timestamps found in JSON listings, parsed as UTC
LISTING_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


def debug(message: str, *args: Any) -> None:
    try:
        debug_env = os.getenv("DEBUG", "")
        if "swift" in debug_env:
            print(f"swiftstore: {message}", *args)
    except Exception:
        pass


def quote_segment(segment: str) -> str:
    # Object names may contain "/" which Swift treats as part of the name
    return quote(segment, safe="/")


def parse_int_header(headers: Mapping[str, str], name: str) -> int:
    value = headers.get(name)
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise SwiftHeaderError(name, value, exc) from exc


def parse_http_date(value: str) -> datetime:
    """Parse an RFC 7231 date such as ``Fri, 12 Jun 2010 13:40:18 GMT``."""
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError) as exc:
        raise SwiftHeaderError("Last-Modified", value, exc) from exc


def parse_listing_timestamp(value: str) -> datetime:
    """Parse a listing timestamp such as ``2012-11-11T14:49:47.887250``.

    Fractional seconds are dropped so listings agree with HEAD responses,
    which are only accurate to the second.
    """
    whole_seconds = value.split(".", 1)[0]
    return datetime.strptime(whole_seconds, LISTING_TIME_FORMAT).replace(tzinfo=timezone.utc)
