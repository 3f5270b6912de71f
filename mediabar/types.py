#!/usr/bin/env python3
"""Type definitions for mediabar structures."""

from typing import Callable, TypedDict, TYPE_CHECKING

if TYPE_CHECKING:
    import mediabar.statestore


class MediaInfoPayload(TypedDict, total=False):
    """JSON object printed by `media-control get`. All fields are optional
    and any of them may also be null."""

    # Track information
    title: str | None
    artist: str | None
    album: str | None
    genre: str | None
    composer: str | None
    trackNumber: int | None

    # Timing
    duration: float | None
    elapsedTime: float | None
    playbackRate: float | None
    playing: bool | None
    isPlaying: bool | None
    timestamp: str | None

    # Queue
    queueIndex: int | None
    totalQueueCount: int | None

    # Source application
    bundleIdentifier: str | None
    processIdentifier: int | None
    isMusicApp: bool | None
    uniqueIdentifier: int | None
    contentItemIdentifier: str | None
    mediaType: str | None

    # Artwork
    artworkData: str | None
    artworkMimeType: str | None


class StatusPayload(TypedDict, total=False):
    """flattened ServiceStatus handed to templates and --once output"""

    isloading: bool
    lasterror: str | None
    status_text: str
    has_valid_media: bool
    media: MediaInfoPayload


StatusListener = Callable[["mediabar.statestore.ServiceStatus"], None]
