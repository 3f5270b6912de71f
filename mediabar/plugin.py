#!/usr/bin/env python3
''' Plugin definition '''

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import mediabar.config
    from PySide6.QtCore import QSettings  # pylint: disable=no-name-in-module


class MediaBarPlugin:
    ''' base class of plugins '''

    def __init__(self,
                 config: "mediabar.config.ConfigFile | None" = None,
                 qsettings: "QSettings | None" = None):
        self.available: bool = True
        self.plugintype: str = ''
        self.config: "mediabar.config.ConfigFile | None" = config
        self.displayname: str = ''

        if qsettings:
            self.defaults(qsettings)
            return

        if not self.config:
            logging.debug('Plugin was not called with config')

    def defaults(self, qsettings: "QSettings") -> None:
        ''' (re-)set the default configuration values for this plugin '''
