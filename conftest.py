#!/usr/bin/env python3
"""pytest fixtures"""

import contextlib
import os
import pathlib
import sys
import tempfile

import pytest
from PySide6.QtCore import (  # pylint: disable=import-error, no-name-in-module
    QCoreApplication,
    QSettings,
)

import mediabar.bootstrap
import mediabar.config

# DO NOT CHANGE THIS TO BE com.github.mediabar
# otherwise your actual settings will disappear!
DOMAIN = "com.github.mediabar.testsuite"


def reboot_macosx_prefs():
    """work around Mac OS X's preference caching"""
    if sys.platform == "darwin":
        os.system(f"defaults delete {DOMAIN}")


@pytest.fixture
def getroot(pytestconfig):
    """get the base of the source tree"""
    return pytestconfig.rootpath


@pytest.fixture
def bootstrap(getroot):  # pylint: disable=redefined-outer-name
    """bootstrap a configuration"""
    with contextlib.suppress(PermissionError):  # Windows blows
        with tempfile.TemporaryDirectory(ignore_cleanup_errors=True) as newpath:
            bundledir = pathlib.Path(getroot).joinpath("mediabar")
            mediabar.bootstrap.set_qt_names(domain=DOMAIN, appname="testsuite")
            config = mediabar.config.ConfigFile(
                bundledir=bundledir, logpath=newpath, testmode=True
            )
            config.cparser.sync()
            config.testdir = pathlib.Path(newpath)
            yield config


#
# OS X has a lot of caching wrt preference files
# so we have do a lot of work to make sure they
# don't stick around
#
@pytest.fixture(autouse=True, scope="function")
def clear_old_testsuite():
    """clear out old testsuite configs"""
    if sys.platform == "win32":
        qsettingsformat = QSettings.IniFormat
    else:
        qsettingsformat = QSettings.NativeFormat

    mediabar.bootstrap.set_qt_names(domain=DOMAIN, appname="testsuite")
    config = QSettings(
        qsettingsformat,
        QSettings.UserScope,
        QCoreApplication.organizationName(),
        QCoreApplication.applicationName(),
    )
    config.clear()
    config.sync()
    filename = pathlib.Path(config.fileName())
    del config
    if filename.exists():
        filename.unlink()
    reboot_macosx_prefs()
    yield filename
    if filename.exists():
        filename.unlink()
    reboot_macosx_prefs()
