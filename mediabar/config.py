#!/usr/bin/env python3
"""
config file parsing/handling
"""

import contextlib
import logging
import pathlib
import sys

from PySide6.QtCore import (  # pylint: disable=no-name-in-module
    QCoreApplication,
    QSettings,
    QStandardPaths,
)

import mediabar
import mediabar.inputs.mediacontrol
import mediabar.notifications.textoutput

DEFAULT_INTERVAL = 5.0


class ConfigFile:  # pylint: disable=too-many-instance-attributes
    """read and write to the QSettings store"""

    BUNDLEDIR: pathlib.Path | None = None

    def __init__(
        self,
        bundledir: str | pathlib.Path | None = None,
        logpath: str | pathlib.Path | None = None,
        reset: bool = False,
        testmode: bool = False,
    ):
        self.version: str = mediabar.__version__
        self.testmode: bool = testmode
        self.basedir: pathlib.Path = pathlib.Path(
            QStandardPaths.standardLocations(QStandardPaths.DocumentsLocation)[0],
            QCoreApplication.applicationName(),
        )
        self.logpath: pathlib.Path = self.basedir.joinpath("logs", "debug.log")
        if logpath:
            self.logpath = pathlib.Path(logpath)

        if bundledir:
            ConfigFile.BUNDLEDIR = pathlib.Path(bundledir)
        elif not ConfigFile.BUNDLEDIR:
            ConfigFile.BUNDLEDIR = pathlib.Path(__file__).resolve().parent

        self.templatedir: pathlib.Path = ConfigFile.BUNDLEDIR.joinpath("templates")

        logging.info("Logpath: %s", self.logpath)
        logging.info("Bundle: %s", ConfigFile.BUNDLEDIR)

        self.qsettingsformat: QSettings.Format = QSettings.NativeFormat
        if sys.platform == "win32":
            self.qsettingsformat = QSettings.IniFormat

        self.cparser: QSettings = QSettings(
            self.qsettingsformat,
            QSettings.UserScope,
            QCoreApplication.organizationName(),
            QCoreApplication.applicationName(),
        )
        logging.info("configuration: %s", self.cparser.fileName())
        self.txttemplate: str = str(self.templatedir.joinpath("basic-plain.txt"))
        self.loglevel: str = "DEBUG"
        self.interval: float = DEFAULT_INTERVAL
        self.testdir: pathlib.Path | None = None

        self._force_set_statics()

        self.defaults()
        if reset:
            self.cparser.clear()
            self._force_set_statics()
            self.save()
        else:
            self.get()

    def _force_set_statics(self) -> None:
        """make sure these are always set"""
        if self.testmode:
            self.cparser.setValue("testmode/enabled", True)

    def reset(self) -> None:
        """forcibly go back to defaults"""
        logging.debug("config reset")
        self.__init__(bundledir=ConfigFile.BUNDLEDIR, reset=True, testmode=self.testmode)  # pylint: disable=unnecessary-dunder-call

    def get(self) -> None:
        """refresh values"""

        self.cparser.sync()
        with contextlib.suppress(TypeError):
            self.loglevel = self.cparser.value("settings/loglevel", defaultValue="DEBUG")

        self.txttemplate = self.cparser.value(
            "textoutput/txttemplate", defaultValue=self.txttemplate
        )
        self.interval = self.getinterval()

    def defaults(self) -> None:
        """default values for things"""
        logging.debug("set defaults")

        settings = QSettings(
            self.qsettingsformat,
            QSettings.SystemScope,
            QCoreApplication.organizationName(),
            QCoreApplication.applicationName(),
        )

        self._defaults_general_settings(settings)
        self._defaults_plugins(settings)

    def _defaults_general_settings(self, settings: QSettings) -> None:
        """default values for general settings"""
        settings.setValue("settings/interval", DEFAULT_INTERVAL)
        settings.setValue("settings/loglevel", self.loglevel)
        settings.setValue("textoutput/txttemplate", self.txttemplate)

    @staticmethod
    def _defaults_plugins(settings: QSettings) -> None:
        """let the plugins set their own defaults"""
        mediabar.inputs.mediacontrol.Plugin(qsettings=settings)
        mediabar.notifications.textoutput.Plugin(qsettings=settings)

    def getinterval(self) -> float:
        """seconds between fetches"""
        try:
            interval = self.cparser.value(
                "settings/interval", type=float, defaultValue=DEFAULT_INTERVAL
            )
        except (TypeError, ValueError):
            interval = DEFAULT_INTERVAL

        if not interval or interval <= 0:
            logging.error("Invalid polling interval %s; using %s", interval, DEFAULT_INTERVAL)
            return DEFAULT_INTERVAL
        return interval

    def getcommand(self) -> str:
        """path to the media-control executable"""
        return self.cparser.value(
            "mediacontrol/command", defaultValue=mediabar.inputs.mediacontrol.DEFAULT_COMMAND
        )

    def getargument(self) -> str:
        """argument that asks media-control for the current state"""
        return self.cparser.value(
            "mediacontrol/argument", defaultValue=mediabar.inputs.mediacontrol.DEFAULT_ARGUMENT
        )

    @staticmethod
    def getbundledir() -> pathlib.Path | None:
        """get the bundle dir"""
        return ConfigFile.BUNDLEDIR

    def save(self) -> None:
        """save the current set"""

        self.cparser.setValue("settings/interval", self.interval)
        self.cparser.setValue("settings/loglevel", self.loglevel)
        self.cparser.setValue("textoutput/txttemplate", self.txttemplate)
        self.cparser.sync()
