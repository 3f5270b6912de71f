#!/usr/bin/env python3
"""single source of truth for what observers see"""

import dataclasses
import logging
import threading

from mediabar.mediainfo import EMPTY, MediaInfo
from mediabar.types import StatusListener, StatusPayload


@dataclasses.dataclass(frozen=True)
class ServiceStatus:
    """the three observable axes, read together"""

    isloading: bool = False
    lasterror: str | None = None
    current: MediaInfo = EMPTY

    @property
    def has_valid_media(self) -> bool:
        """something with a title is actually playing"""
        return self.current.title is not None and self.current.playing

    @property
    def status_text(self) -> str:
        """one line summary suitable for a menu bar"""
        if self.isloading:
            return "Loading..."
        if self.lasterror:
            return f"Error: {self.lasterror}"
        if self.has_valid_media:
            return self.current.truncated_menubar_text
        return "No Media Playing"

    def to_payload(self) -> StatusPayload:
        """flatten for JSON output"""
        return {
            "isloading": self.isloading,
            "lasterror": self.lasterror,
            "status_text": self.status_text,
            "has_valid_media": self.has_valid_media,
            "media": self.current.to_payload(),
        }


class StateStore:
    """Holds the last known ServiceStatus and decides what counts as a change.

    apply_result() is the only writer.  Every read and write happens under
    one lock so the scheduler, fetch completion and observers on other
    threads all see a coherent snapshot.  Listeners are called with the new
    snapshot, in registration order, only when something observable
    changed.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._status = ServiceStatus()
        self._settled = False
        self._listeners: list[StatusListener] = []

    @property
    def status(self) -> ServiceStatus:
        with self._lock:
            return self._status

    @property
    def current(self) -> MediaInfo:
        return self.status.current

    @property
    def isloading(self) -> bool:
        return self.status.isloading

    @property
    def lasterror(self) -> str | None:
        return self.status.lasterror

    def add_listener(self, listener: StatusListener) -> None:
        """call listener(status) on every change"""
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: StatusListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def begin_fetch(self) -> bool:
        """set the loading flag if this is a cold start

        A cold start means nothing has ever been applied: no media, no
        error.  Returns True if the caller must hand showloading=True to
        the matching apply_result()/cancel_fetch().
        """
        with self._lock:
            status = self._status
            if self._settled or status.current != EMPTY or status.lasterror is not None:
                return False
            if not status.isloading:
                logging.debug("cold start, showing loading state")
                self._commit(dataclasses.replace(status, isloading=True))
            return True

    def cancel_fetch(self, showloading: bool = False) -> bool:
        """a fetch was abandoned; only undo the loading flag it set"""
        with self._lock:
            if showloading and self._status.isloading:
                return self._commit(dataclasses.replace(self._status, isloading=False))
            return False

    def apply_result(self,
                     result: MediaInfo | Exception | str,
                     showloading: bool = False) -> bool:
        """apply one fetch result

        result is either a MediaInfo or the failure, given as the
        exception or just its message.  Returns True if observers were
        notified.
        """
        if not isinstance(result, (MediaInfo, Exception, str)):
            raise TypeError(f"cannot apply {type(result).__name__}")

        with self._lock:
            status = self._status
            if isinstance(result, MediaInfo):
                if result != status.current:
                    logging.debug("Media info changed: %s -> %s", status.current.menubar_text,
                                  result.menubar_text)
                    status = dataclasses.replace(status, current=result, lasterror=None)
                else:
                    logging.debug("Media info unchanged, skipping update")
            else:
                message = result if isinstance(result, str) else str(result)
                if message != status.lasterror or status.current != EMPTY:
                    logging.info("Fetch failed: %s", message)
                    status = dataclasses.replace(status, current=EMPTY, lasterror=message)
                else:
                    logging.debug("Same error as before, skipping update")

            if showloading:
                status = dataclasses.replace(status, isloading=False)

            self._settled = True
            return self._commit(status)

    def _commit(self, status: ServiceStatus) -> bool:
        """store and notify; caller holds the lock"""
        if status == self._status:
            return False
        self._status = status
        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception as error:  # pylint: disable=broad-except
                logging.exception("status listener %s failed: %s", listener, error)
        return True
