#!/usr/bin/env python3
"""bootstrap the app"""

import logging
import logging.handlers
import pathlib
import sys
import time

from PySide6.QtCore import QCoreApplication, QStandardPaths  # pylint: disable=no-name-in-module

LOGFORMAT = ("%(asctime)s %(levelname)s %(process)d %(processName)s/%(threadName)s "
             "%(module)s:%(funcName)s:%(lineno)d %(message)s")


def set_qt_names(
    app: QCoreApplication | None = None,
    domain: str = "com.github.mediabar",
    appname: str = "MediaBar",
) -> QCoreApplication:
    """bootstrap Qt for configuration"""
    if not app:
        app = QCoreApplication.instance()
    if not app:
        app = QCoreApplication(sys.argv[:1])
    app.setOrganizationDomain(domain)
    app.setOrganizationName("mediabar")
    app.setApplicationName(appname)
    return app


def setuplogging(
    logdir: pathlib.Path | str | None = None,
    logname: str = "debug.log",
    rotate: bool = False,
    console: bool = False,
) -> pathlib.Path:
    """configure logging"""
    if logdir:
        logpath = pathlib.Path(logdir)
        if logpath.is_file():
            logname = logpath.name
            logpath = logpath.parent
    else:
        logpath = pathlib.Path(
            QStandardPaths.standardLocations(QStandardPaths.DocumentsLocation)[0],
            QCoreApplication.applicationName(),
        ).joinpath("logs")
    logpath.mkdir(parents=True, exist_ok=True)
    logfile = logpath.joinpath(logname)

    besuretorotate = bool(logfile.exists() and rotate)
    logfhandler = logging.handlers.RotatingFileHandler(
        filename=logfile, backupCount=10, encoding="utf-8"
    )
    if besuretorotate:
        # a previous instance may still hold the file for a moment
        for attempt in range(3):
            try:
                logfhandler.doRollover()
                break
            except OSError as error:
                if attempt < 2:
                    time.sleep(0.5 * (attempt + 1))
                    continue
                logging.warning(
                    "Could not rotate log file after 3 attempts: %s",
                    error,
                )

    handlers: list[logging.Handler] = [logfhandler]
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))

    logging.basicConfig(
        format=LOGFORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S%z",
        handlers=handlers,
        level=logging.DEBUG,
        force=True,
    )
    logging.captureWarnings(True)
    return logpath
