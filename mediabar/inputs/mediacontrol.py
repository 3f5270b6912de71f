#!/usr/bin/env python3
''' Read now playing information from the media-control tool

    media-control ( https://github.com/ungive/media-control ) prints a
    JSON object describing the system-wide now playing session for
    `media-control get`.  Depending upon the version and whether anything
    is playing, it may print a plain "No media" line instead.
'''

import asyncio
import json
import logging
import pathlib
import subprocess
import sys
from typing import TYPE_CHECKING

from mediabar.exceptions import (
    CommandFailed,
    ExecutableNotFound,
    LaunchFailed,
    MediaServiceError,
)
from mediabar.inputs import InputPlugin
from mediabar.mediainfo import MediaInfo
import mediabar.responseparser

if TYPE_CHECKING:
    import mediabar.config
    from PySide6.QtCore import QSettings  # pylint: disable=no-name-in-module

DEFAULT_COMMAND = '/opt/homebrew/bin/media-control'
DEFAULT_ARGUMENT = 'get'


class MediaControlCommand:
    ''' run media-control once and collect what it says '''

    def __init__(self, command: str = DEFAULT_COMMAND, argument: str = DEFAULT_ARGUMENT):
        self.command = command
        self.argument = argument

    def run(self) -> tuple[bytes, int]:
        ''' block until the process exits

            stdout and stderr are captured into a single buffer.  Returns
            the buffer and the exit status; a non-zero status raises
            CommandFailed instead.
        '''
        try:
            completed = subprocess.run([self.command, self.argument],
                                       stdout=subprocess.PIPE,
                                       stderr=subprocess.STDOUT,
                                       check=False)
        except FileNotFoundError as error:
            raise ExecutableNotFound(self.command) from error
        except OSError as error:
            raise LaunchFailed(str(error)) from error

        logging.debug('%s %s exited %s with %s bytes', self.command, self.argument,
                      completed.returncode, len(completed.stdout))

        if completed.returncode != 0:
            output = completed.stdout.decode('utf-8', errors='replace').strip()
            raise CommandFailed(output or 'Unknown error')

        return completed.stdout, completed.returncode


class Plugin(InputPlugin):
    ''' handler for media-control '''

    def __init__(self,
                 config: "mediabar.config.ConfigFile | None" = None,
                 qsettings: "QSettings | None" = None,
                 command: str | None = None,
                 argument: str | None = None):
        super().__init__(config=config, qsettings=qsettings)
        self.displayname = 'media-control'
        self.commandoverride = command
        self.argumentoverride = argument
        self.mediacontrol: MediaControlCommand | None = None

    def defaults(self, qsettings: "QSettings") -> None:
        qsettings.setValue('mediacontrol/command', DEFAULT_COMMAND)
        qsettings.setValue('mediacontrol/argument', DEFAULT_ARGUMENT)

    def gethandler(self) -> MediaControlCommand:
        ''' (re-)build the command if the configuration changed '''
        command = self.commandoverride
        argument = self.argumentoverride
        if self.config:
            command = command or self.config.getcommand()
            argument = argument or self.config.getargument()
        command = command or DEFAULT_COMMAND
        argument = argument or DEFAULT_ARGUMENT

        if (not self.mediacontrol or self.mediacontrol.command != command
                or self.mediacontrol.argument != argument):
            logging.debug('new media query command = %s %s', command, argument)
            self.mediacontrol = MediaControlCommand(command=command, argument=argument)
        return self.mediacontrol

    async def start(self) -> None:
        ''' configure the command '''
        handler = self.gethandler()
        if not pathlib.Path(handler.command).exists():
            logging.warning('%s does not exist; fetches will fail until it is installed',
                            handler.command)

    async def getplayingtrack(self) -> MediaInfo:
        ''' run the command in a worker thread and parse the result '''
        handler = self.gethandler()
        data, _ = await asyncio.to_thread(handler.run)
        return mediabar.responseparser.parse_response(data)


async def main():
    ''' entry point as a standalone app'''
    logging.basicConfig(level=logging.DEBUG)

    plugin = Plugin(command=sys.argv[1] if len(sys.argv) > 1 else None)
    await plugin.start()
    try:
        mediainfo = await plugin.getplayingtrack()
    except MediaServiceError as error:
        print(f'Error: {error}')
        sys.exit(1)

    if mediainfo.is_empty:
        print('No Media Playing')
        return

    print(f'Artist: {mediainfo.display_artist} | Title: {mediainfo.display_title} | '
          f'Album: {mediainfo.display_album}')
    payload = dict(mediainfo.to_payload())
    if payload.pop('artworkData', None):
        print('Got artwork')
    print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    asyncio.run(main())
