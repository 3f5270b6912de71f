#!/usr/bin/env python3
"""Input Plugin definition"""

from typing import TYPE_CHECKING

from mediabar.plugin import MediaBarPlugin

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings  # pylint: disable=no-name-in-module

    import mediabar.config
    import mediabar.mediainfo


class InputPlugin(MediaBarPlugin):
    """base class of input plugins"""

    def __init__(
        self,
        config: "mediabar.config.ConfigFile | None" = None,
        qsettings: "QSettings | None" = None,
    ):
        super().__init__(config=config, qsettings=qsettings)
        self.plugintype: str = "input"

    #### Data feed methods

    async def getplayingtrack(self) -> "mediabar.mediainfo.MediaInfo":
        """Get the currently playing media.

        Returns MediaInfo.EMPTY when nothing is playing and raises a
        mediabar.exceptions.MediaServiceError when the source failed.
        """
        raise NotImplementedError

    #### Control methods

    async def start(self) -> None:
        """any initialization before actual polling starts"""

    async def stop(self) -> None:
        """stopping either the entire program or just this
        input"""
