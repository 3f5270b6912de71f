#!/usr/bin/env python3
"""
normalized snapshot of what is currently playing
"""

import base64
import binascii
import dataclasses
import logging
from typing import Any, ClassVar

from mediabar.types import MediaInfoPayload

MENUBAR_MAXLENGTH = 50

# attribute name, JSON key, decoded type
FIELDS: tuple[tuple[str, str, type], ...] = (
    ("title", "title", str),
    ("artist", "artist", str),
    ("album", "album", str),
    ("genre", "genre", str),
    ("composer", "composer", str),
    ("duration", "duration", float),
    ("elapsed_time", "elapsedTime", float),
    ("playback_rate", "playbackRate", float),
    ("track_number", "trackNumber", int),
    ("queue_index", "queueIndex", int),
    ("total_queue_count", "totalQueueCount", int),
    ("process_identifier", "processIdentifier", int),
    ("unique_identifier", "uniqueIdentifier", int),
    ("bundle_identifier", "bundleIdentifier", str),
    ("content_item_identifier", "contentItemIdentifier", str),
    ("media_type", "mediaType", str),
    ("artwork_mime_type", "artworkMimeType", str),
    ("timestamp", "timestamp", str),
    ("artwork_data", "artworkData", str),
    ("is_music_app", "isMusicApp", bool),
)

PLAYING_KEYS = ("playing", "isPlaying")


def _decode_value(key: str, value: Any, kind: type) -> Any:
    """coerce a single JSON value to the declared type or complain"""
    if value is None:
        return None

    # bool is a subclass of int so it has to be ruled out explicitly
    if kind is bool:
        if isinstance(value, bool):
            return value
    elif kind is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif kind is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
    elif isinstance(value, kind):
        return value

    raise ValueError(f"{key}: expected {kind.__name__}, got {type(value).__name__}")


def _mmss(seconds: float | None) -> str:
    if seconds is None:
        return "0:00"
    seconds = int(seconds)
    return f"{seconds // 60}:{seconds % 60:02d}"


@dataclasses.dataclass(frozen=True)
class MediaInfo:  # pylint: disable=too-many-instance-attributes
    """One decoded `media-control get` answer.

    Every field is optional since the source application decides what
    gets reported.  Two values are the same state if and only if every
    field matches.
    """

    EMPTY: ClassVar["MediaInfo"]

    title: str | None = None
    artist: str | None = None
    album: str | None = None
    genre: str | None = None
    composer: str | None = None
    duration: float | None = None
    elapsed_time: float | None = None
    playback_rate: float | None = None
    playing: bool = False
    track_number: int | None = None
    queue_index: int | None = None
    total_queue_count: int | None = None
    process_identifier: int | None = None
    unique_identifier: int | None = None
    bundle_identifier: str | None = None
    content_item_identifier: str | None = None
    media_type: str | None = None
    artwork_mime_type: str | None = None
    timestamp: str | None = None
    artwork_data: str | None = None
    is_music_app: bool | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "MediaInfo":
        """build from a decoded JSON object

        Raises ValueError if the payload is not an object or a present
        field has the wrong type.  Absent and null fields are None.
        """
        if not isinstance(payload, dict):
            raise ValueError(f"expected a JSON object, got {type(payload).__name__}")

        values: dict[str, Any] = {}
        for attr, key, kind in FIELDS:
            values[attr] = _decode_value(key, payload.get(key), kind)

        playing = None
        for key in PLAYING_KEYS:
            playing = _decode_value(key, payload.get(key), bool)
            if playing is not None:
                break
        values["playing"] = bool(playing)

        return cls(**values)

    def to_payload(self) -> MediaInfoPayload:
        """JSON-shaped dict with only the fields that have a value"""
        payload: dict[str, Any] = {}
        for attr, key, _ in FIELDS:
            value = getattr(self, attr)
            if value is not None:
                payload[key] = value
        payload["playing"] = self.playing
        return payload  # type: ignore[return-value]

    @property
    def is_empty(self) -> bool:
        """true if this is (equal to) the no-media sentinel"""
        return self == MediaInfo.EMPTY

    @property
    def display_title(self) -> str:
        return self.title or "Unknown Title"

    @property
    def display_artist(self) -> str:
        return self.artist or "Unknown Artist"

    @property
    def display_album(self) -> str:
        return self.album or "Unknown Album"

    @property
    def menubar_text(self) -> str:
        return f"{self.display_artist} - {self.display_title}"

    @property
    def truncated_menubar_text(self) -> str:
        text = self.menubar_text
        if len(text) > MENUBAR_MAXLENGTH:
            return text[: MENUBAR_MAXLENGTH - 3] + "..."
        return text

    @property
    def formatted_duration(self) -> str:
        return _mmss(self.duration)

    @property
    def formatted_elapsed_time(self) -> str:
        return _mmss(self.elapsed_time)

    @property
    def progress(self) -> float:
        """fraction of the track that has been played, 0.0 if unknown"""
        if not self.duration or self.elapsed_time is None or self.duration <= 0:
            return 0.0
        return min(max(self.elapsed_time / self.duration, 0.0), 1.0)

    @property
    def has_artwork(self) -> bool:
        return bool(self.artwork_data)

    def artwork_bytes(self) -> bytes | None:
        """decode the artwork blob, dropping any data: URI prefix"""
        if not self.artwork_data:
            return None

        data = self.artwork_data
        if data.startswith("data:") and "," in data:
            data = data.split(",", 1)[1]

        try:
            return base64.b64decode(data)
        except (binascii.Error, ValueError) as error:
            logging.debug("artwork is not valid base64: %s", error)
            return None


MediaInfo.EMPTY = MediaInfo()
EMPTY = MediaInfo.EMPTY
