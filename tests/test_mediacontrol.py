#!/usr/bin/env python3
"""test the media-control input plugin"""
# pylint: disable=redefined-outer-name

import json
import sys
from unittest.mock import MagicMock, patch

import pytest

import mediabar.inputs.mediacontrol
from mediabar.exceptions import (
    CommandFailed,
    EmptyResponse,
    ExecutableNotFound,
    LaunchFailed,
    MediaServiceError,
    ParseFailed,
)
from mediabar.mediainfo import EMPTY, MediaInfo

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="uses shell scripts")

KRAFTKLUB = {
    "artist": "Kraftklub",
    "title": "Wenn ich tot bin, fang ich wieder an",
    "playing": True,
}


@pytest.fixture
def makescript(tmp_path):
    """write an executable stand-in for media-control"""

    def _makescript(body, name="media-control", mode=0o755):
        script = tmp_path.joinpath(name)
        script.write_text(f'#!/bin/sh\n[ "$1" = "get" ] || exit 64\n{body}\n', encoding="utf-8")
        script.chmod(mode)
        return str(script)

    return _makescript


@pytest.fixture
def payloadscript(tmp_path, makescript):
    """script that prints a JSON file"""

    def _payloadscript(payload):
        payloadfile = tmp_path.joinpath("payload.json")
        payloadfile.write_text(json.dumps(payload), encoding="utf-8")
        return makescript(f'cat "{payloadfile}"')

    return _payloadscript


def test_run_returns_output_and_status(payloadscript):
    """stdout comes back with exit status 0"""
    command = mediabar.inputs.mediacontrol.MediaControlCommand(command=payloadscript(KRAFTKLUB))
    data, exitcode = command.run()
    assert exitcode == 0
    assert json.loads(data) == KRAFTKLUB


def test_run_combines_stdout_and_stderr(makescript):
    """stderr lands in the same buffer"""
    command = mediabar.inputs.mediacontrol.MediaControlCommand(
        command=makescript('echo out; echo err >&2'))
    data, _ = command.run()
    assert b"out" in data
    assert b"err" in data


def test_run_passes_the_argument(makescript):
    """the script exits 64 unless called with get"""
    command = mediabar.inputs.mediacontrol.MediaControlCommand(command=makescript("echo ok"),
                                                               argument="stream")
    with pytest.raises(CommandFailed):
        command.run()


def test_run_nonzero_exit(makescript):
    """non-zero exit carries the captured text"""
    command = mediabar.inputs.mediacontrol.MediaControlCommand(
        command=makescript("echo 'device locked' >&2; exit 1"))
    with pytest.raises(CommandFailed) as excinfo:
        command.run()
    assert excinfo.value.output == "device locked"
    assert str(excinfo.value) == "media query command failed: device locked"


def test_run_nonzero_exit_no_output(makescript):
    """silence still produces a readable message"""
    command = mediabar.inputs.mediacontrol.MediaControlCommand(command=makescript("exit 2"))
    with pytest.raises(CommandFailed) as excinfo:
        command.run()
    assert excinfo.value.output == "Unknown error"


def test_run_missing_executable(tmp_path):
    """a binary that isn't there"""
    missing = str(tmp_path.joinpath("nope", "media-control"))
    command = mediabar.inputs.mediacontrol.MediaControlCommand(command=missing)
    with pytest.raises(ExecutableNotFound) as excinfo:
        command.run()
    assert isinstance(excinfo.value, LaunchFailed)
    assert missing in str(excinfo.value)


def test_run_not_executable(makescript):
    """a binary that can't be run"""
    command = mediabar.inputs.mediacontrol.MediaControlCommand(
        command=makescript("echo hi", mode=0o644))
    with pytest.raises(LaunchFailed) as excinfo:
        command.run()
    assert not isinstance(excinfo.value, ExecutableNotFound)
    assert str(excinfo.value).startswith("failed to launch media query command: ")


def test_run_oserror():
    """any other launch problem"""
    command = mediabar.inputs.mediacontrol.MediaControlCommand(command="/bin/whatever")
    with patch("subprocess.run", side_effect=OSError("too many open files")):
        with pytest.raises(LaunchFailed) as excinfo:
            command.run()
    assert excinfo.value.detail == "too many open files"


@pytest.mark.asyncio
async def test_plugin_getplayingtrack(payloadscript):
    """the plugin runs the command and parses the output"""
    plugin = mediabar.inputs.mediacontrol.Plugin(command=payloadscript(KRAFTKLUB))
    await plugin.start()
    mediainfo = await plugin.getplayingtrack()
    assert mediainfo == MediaInfo(artist="Kraftklub",
                                  title="Wenn ich tot bin, fang ich wieder an",
                                  playing=True)
    await plugin.stop()


@pytest.mark.asyncio
async def test_plugin_nomedia(makescript):
    """plain text notice means nothing is playing"""
    plugin = mediabar.inputs.mediacontrol.Plugin(
        command=makescript("echo 'No media currently playing'"))
    assert await plugin.getplayingtrack() is EMPTY


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body, errortype",
    [
        ("exit 0", EmptyResponse),
        ("echo '{broken'", ParseFailed),
        ("echo 'device locked'; exit 1", CommandFailed),
    ],
)
async def test_plugin_failures(makescript, body, errortype):
    """each failure is classified"""
    plugin = mediabar.inputs.mediacontrol.Plugin(command=makescript(body))
    with pytest.raises(errortype) as excinfo:
        await plugin.getplayingtrack()
    assert isinstance(excinfo.value, MediaServiceError)


@pytest.mark.asyncio
async def test_plugin_start_missing_binary(tmp_path, caplog):
    """starting with a missing binary only warns"""
    plugin = mediabar.inputs.mediacontrol.Plugin(command=str(tmp_path.joinpath("missing")))
    await plugin.start()
    assert "does not exist" in caplog.text
    with pytest.raises(ExecutableNotFound):
        await plugin.getplayingtrack()


def test_plugin_uses_config():
    """command and argument come from the configuration"""
    config = MagicMock()
    config.getcommand.return_value = "/usr/local/bin/media-control"
    config.getargument.return_value = "get"
    plugin = mediabar.inputs.mediacontrol.Plugin(config=config)
    handler = plugin.gethandler()
    assert handler.command == "/usr/local/bin/media-control"
    assert handler.argument == "get"

    config.getcommand.return_value = "/opt/bin/media-control"
    assert plugin.gethandler() is not handler
    assert plugin.gethandler().command == "/opt/bin/media-control"


def test_plugin_overrides_beat_config():
    """command line overrides win"""
    config = MagicMock()
    config.getcommand.return_value = "/usr/local/bin/media-control"
    config.getargument.return_value = "get"
    plugin = mediabar.inputs.mediacontrol.Plugin(config=config, command="/tmp/fake")
    assert plugin.gethandler().command == "/tmp/fake"


def test_plugin_defaults():
    """no config falls back to the homebrew location"""
    plugin = mediabar.inputs.mediacontrol.Plugin()
    handler = plugin.gethandler()
    assert handler.command == "/opt/homebrew/bin/media-control"
    assert handler.argument == "get"


def test_plugin_qsettings_defaults():
    """defaults land in the given settings"""
    qsettings = MagicMock()
    mediabar.inputs.mediacontrol.Plugin(qsettings=qsettings)
    qsettings.setValue.assert_any_call("mediacontrol/command", "/opt/homebrew/bin/media-control")
    qsettings.setValue.assert_any_call("mediacontrol/argument", "get")


@pytest.mark.asyncio
async def test_main_error(tmp_path, capsys):
    """standalone mode exits 1 on failure"""
    with patch("sys.argv", ["mediacontrol", str(tmp_path.joinpath("missing"))]):
        with pytest.raises(SystemExit) as excinfo:
            await mediabar.inputs.mediacontrol.main()
    assert excinfo.value.code == 1
    assert "Error:" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_main_playing(payloadscript, capsys):
    """standalone mode prints what is playing"""
    with patch("sys.argv", ["mediacontrol", payloadscript(KRAFTKLUB)]):
        await mediabar.inputs.mediacontrol.main()
    assert "Artist: Kraftklub" in capsys.readouterr().out
