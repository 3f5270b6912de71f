#!/usr/bin/env python3
"""turn raw media-control output into a MediaInfo"""

import json
import logging

from mediabar.exceptions import EmptyResponse, ParseFailed
from mediabar.mediainfo import EMPTY, MediaInfo

NOMEDIA_MARKER = "no media"


def _is_nomedia_text(data: bytes) -> bool:
    """some versions print a plain text line instead of JSON when idle"""
    text = data.decode("utf-8", errors="replace")
    return NOMEDIA_MARKER in text.strip().casefold()


def parse_response(data: bytes) -> MediaInfo:
    """decode the output of `media-control get`

    Returns EMPTY for the plain text no-media notice.  Raises
    EmptyResponse for no output at all and ParseFailed for anything else
    that is not a usable JSON object.
    """
    if not data:
        raise EmptyResponse()

    try:
        return MediaInfo.from_payload(json.loads(data))
    except ValueError as error:
        # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors
        if _is_nomedia_text(data):
            logging.debug("media-control reports no media")
            return EMPTY
        raise ParseFailed(str(error)) from error
