#!/usr/bin/env python3
"""Notification Plugin definition"""

from typing import TYPE_CHECKING

from mediabar.plugin import MediaBarPlugin

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings  # pylint: disable=no-name-in-module

    import mediabar.config
    import mediabar.statestore


class NotificationPlugin(MediaBarPlugin):
    """base class for notification plugins"""

    def __init__(
        self,
        config: "mediabar.config.ConfigFile | None" = None,
        qsettings: "QSettings | None" = None,
    ):
        super().__init__(config=config, qsettings=qsettings)
        self.plugintype: str = "notification"

    #### Core notification methods ####

    async def notify_status_change(self, status: "mediabar.statestore.ServiceStatus") -> None:
        """
        Called whenever the observable status changed

        Args:
            status: the new loading flag, error text and current media
        """
        raise NotImplementedError

    #### Plugin lifecycle methods ####

    async def start(self) -> None:
        """Initialize the notification plugin"""

    async def stop(self) -> None:
        """Clean up the notification plugin"""
