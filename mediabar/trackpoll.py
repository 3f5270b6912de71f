#!/usr/bin/env python3
"""poll media-control on a timer"""

import asyncio
import contextlib
import logging
from typing import Any, TYPE_CHECKING

import mediabar.inputs.mediacontrol
from mediabar.exceptions import MediaServiceError
from mediabar.statestore import ServiceStatus, StateStore

if TYPE_CHECKING:
    import mediabar.config
    import mediabar.inputs
    import mediabar.notifications

DEFAULT_INTERVAL = 5.0


class TrackPoll:  # pylint: disable=too-many-instance-attributes
    """
    Fetch from the input plugin every interval and hand results to the store.

    Two states: idle and fetching.  start() fetches right away and then
    once per interval; refresh_now() asks for an extra fetch.  Whichever
    arrives while a fetch is still running is ignored, so there is never
    more than one media-control process at a time.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        store: StateStore | None = None,
        inputplugin: "mediabar.inputs.InputPlugin | None" = None,
        config: "mediabar.config.ConfigFile | None" = None,
        interval: float | None = None,
        notifications: "list[mediabar.notifications.NotificationPlugin] | None" = None,
    ):
        self.config = config
        self.store = store or StateStore()
        self.input = inputplugin or mediabar.inputs.mediacontrol.Plugin(config=config)
        if interval:
            self.interval = interval
        elif config:
            self.interval = config.getinterval()
        else:
            self.interval = DEFAULT_INTERVAL
        self.active_notifications = list(notifications or [])
        self.loop: asyncio.AbstractEventLoop | None = None
        self.running = False
        self.fetchtask: asyncio.Task[None] | None = None
        self.timertask: asyncio.Task[None] | None = None
        self.tasks: set[asyncio.Task[Any]] = set()

    @property
    def fetching(self) -> bool:
        """a fetch is in flight"""
        return self.fetchtask is not None

    async def start(self) -> None:
        """fetch now and then every interval"""
        if self.running:
            return

        self.loop = asyncio.get_running_loop()
        self.running = True
        logging.info("Starting %s polling every %s seconds", self.input.displayname,
                     self.interval)

        try:
            await self.input.start()
        except Exception as error:  # pylint: disable=broad-except
            logging.error("cannot start %s: %s", self.input.displayname, error)

        await self._start_notification_plugins()
        self.store.add_listener(self._status_changed)

        self._trigger("start")
        self.timertask = self.loop.create_task(self._timer())

    async def stop(self) -> None:
        """cancel the timer and let any running fetch finish unobserved"""
        if not self.running:
            return

        logging.debug("Stopping trackpoll")
        self.running = False

        if self.timertask:
            self.timertask.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self.timertask
            self.timertask = None

        if self.fetchtask:
            logging.debug("waiting for in-flight fetch")
            await asyncio.wait({self.fetchtask})

        self.store.remove_listener(self._status_changed)

        try:
            await self.input.stop()
        except Exception as error:  # pylint: disable=broad-except
            logging.error("cannot stop %s: %s", self.input.displayname, error)

        if self.tasks:
            await asyncio.gather(*self.tasks, return_exceptions=True)
        await self._stop_notification_plugins()
        logging.debug("Trackpoll stopped gracefully.")

    async def run_forever(self, stopevent: asyncio.Event) -> None:
        """poll until stopevent is set"""
        await self.start()
        try:
            await stopevent.wait()
        finally:
            await self.stop()

    def refresh_now(self) -> bool:
        """fetch out of band; False if one is already running or stopped"""
        return self._trigger("refresh")

    def refresh_now_threadsafe(self) -> None:
        """refresh_now() for callers that are not on the polling loop"""
        if self.loop:
            self.loop.call_soon_threadsafe(self.refresh_now)

    async def _timer(self) -> None:
        while self.running:
            await asyncio.sleep(self.interval)
            if not self.running:
                break
            self._trigger("timer")

    def _trigger(self, reason: str) -> bool:
        """idle -> fetching, if we are idle"""
        if not self.running or not self.loop:
            logging.debug("not running, ignoring %s", reason)
            return False

        if self.fetchtask:
            logging.debug("fetch in progress, ignoring %s", reason)
            return False

        showloading = self.store.begin_fetch()
        self.fetchtask = self.loop.create_task(self._fetch(showloading))
        return True

    async def _fetch(self, showloading: bool) -> None:
        """fetching -> idle, then publish"""
        try:
            try:
                result: Any = await self.input.getplayingtrack()
            except MediaServiceError as error:
                result = error
            except Exception as error:  # pylint: disable=broad-except
                logging.exception("Failed during getplayingtrack() (%s)", error)
                result = MediaServiceError(f"unexpected failure: {error}")
        finally:
            self.fetchtask = None

        if not self.running:
            logging.debug("stopped during fetch, discarding result")
            self.store.cancel_fetch(showloading)
            return

        try:
            self.store.apply_result(result, showloading=showloading)
        except TypeError as error:
            logging.error("%s returned junk: %s", self.input.displayname, error)
            self.store.apply_result(MediaServiceError(str(error)), showloading=showloading)

    async def _start_notification_plugins(self) -> None:
        """Start all notification plugins"""
        for plugin in self.active_notifications:
            plugin_name = plugin.__class__.__name__
            try:
                await plugin.start()
                logging.debug("Started notification plugin: %s", plugin_name)
            except Exception as err:  # pylint: disable=broad-except
                logging.error("Failed to start notification plugin %s: %s", plugin_name, err)

    async def _stop_notification_plugins(self) -> None:
        for plugin in self.active_notifications:
            try:
                await plugin.stop()
            except Exception as err:  # pylint: disable=broad-except
                logging.error("Failed to stop notification plugin %s: %s",
                              plugin.__class__.__name__, err)

    def _status_changed(self, status: ServiceStatus) -> None:
        """store listener: hand the new status to the notification plugins

        The store may be written from any thread; the plugins always run
        on the polling loop.
        """
        logging.info("Status: %s", status.status_text)
        if not self.active_notifications or not self.loop:
            return

        try:
            onloop = asyncio.get_running_loop() is self.loop
        except RuntimeError:
            onloop = False

        if onloop:
            self._schedule_notify(status)
        else:
            self.loop.call_soon_threadsafe(self._schedule_notify, status)

    def _schedule_notify(self, status: ServiceStatus) -> None:
        task = self.loop.create_task(self._notify_plugins(status))
        self.tasks.add(task)
        task.add_done_callback(self.tasks.discard)

    async def _notify_plugins(self, status: ServiceStatus) -> None:
        """notify all active notification plugins of a status change"""
        for plugin in self.active_notifications:
            try:
                await plugin.notify_status_change(status)
            except Exception as err:  # pylint: disable=broad-except
                logging.error("Notification plugin %s failed: %s", plugin.__class__.__name__,
                              err)
