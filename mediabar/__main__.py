#!/usr/bin/env python3
''' mediabar as run via python -m '''

import argparse
import asyncio
import json
import logging
import platform
import signal
import sys

import mediabar
import mediabar.bootstrap
import mediabar.config
import mediabar.inputs.mediacontrol
import mediabar.notifications.textoutput
import mediabar.trackpoll
from mediabar.exceptions import MediaServiceError
from mediabar.statestore import ServiceStatus, StateStore


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    ''' command line '''
    parser = argparse.ArgumentParser(prog='mediabar',
                                     description='Publish what media-control says is playing.')
    parser.add_argument('--once',
                        action='store_true',
                        help='fetch a single time, print the status as JSON and exit')
    parser.add_argument('--command', help='path to the media-control executable')
    parser.add_argument('--argument', help='argument that asks for the current state')
    parser.add_argument('--interval', type=float, help='seconds between fetches')
    parser.add_argument('--artwork',
                        action='store_true',
                        help='include the raw artwork data in --once output')
    parser.add_argument('--logdir', help='directory for debug.log')
    parser.add_argument('--debug', action='store_true', help='also log to stderr')
    parser.add_argument('--version', action='version', version=f'%(prog)s {mediabar.__version__}')
    args = parser.parse_args(argv)
    if args.interval is not None and args.interval <= 0:
        parser.error('--interval must be positive')
    return args


def makeinput(config: mediabar.config.ConfigFile,
              args: argparse.Namespace) -> mediabar.inputs.mediacontrol.Plugin:
    ''' media-control input with any command line overrides '''
    return mediabar.inputs.mediacontrol.Plugin(config=config,
                                               command=args.command,
                                               argument=args.argument)


async def fetch_once(config: mediabar.config.ConfigFile,
                     args: argparse.Namespace) -> ServiceStatus:
    ''' a single fetch through a fresh store '''
    store = StateStore()
    plugin = makeinput(config, args)
    await plugin.start()
    showloading = store.begin_fetch()
    try:
        try:
            result = await plugin.getplayingtrack()
        except MediaServiceError as error:
            result = error
        except Exception as error:  # pylint: disable=broad-except
            logging.exception('Failed during getplayingtrack() (%s)', error)
            result = MediaServiceError(f'unexpected failure: {error}')
        store.apply_result(result, showloading=showloading)
    finally:
        await plugin.stop()
    return store.status


def printstatus(status: ServiceStatus) -> None:
    ''' console observer '''
    print(status.status_text, flush=True)


async def run_poller(config: mediabar.config.ConfigFile,
                     args: argparse.Namespace,
                     stopevent: asyncio.Event | None = None) -> None:
    ''' poll until told to stop '''
    store = StateStore()
    store.add_listener(printstatus)
    trackpoll = mediabar.trackpoll.TrackPoll(
        store=store,
        inputplugin=makeinput(config, args),
        config=config,
        interval=args.interval,
        notifications=[mediabar.notifications.textoutput.Plugin(config=config)])

    if not stopevent:
        stopevent = asyncio.Event()
    loop = asyncio.get_running_loop()

    def forced_stop(signum, frame):  # pylint: disable=unused-argument
        ''' caught a signal so tell the world to stop '''
        loop.call_soon_threadsafe(stopevent.set)

    # asyncio's signal handlers don't work on Windows
    signal.signal(signal.SIGINT, forced_stop)
    signal.signal(signal.SIGTERM, forced_stop)

    await trackpoll.run_forever(stopevent)


def main(argv: list[str] | None = None) -> int:
    ''' main entrypoint '''
    args = parse_args(argv)

    mediabar.bootstrap.set_qt_names()
    logpath = mediabar.bootstrap.setuplogging(logdir=args.logdir, rotate=True, console=args.debug)
    logging.info('starting up v%s on %s', mediabar.__version__, platform.platform())

    config = mediabar.config.ConfigFile(logpath=logpath)
    if not args.debug:
        logging.getLogger().setLevel(config.loglevel)

    if args.once:
        status = asyncio.run(fetch_once(config, args))
        payload = status.to_payload()
        if not args.artwork:
            payload['media'].pop('artworkData', None)
        print(json.dumps(payload, indent=2))
        return 1 if status.lasterror else 0

    asyncio.run(run_poller(config, args))
    logging.info('shutting main down v%s', config.version)
    return 0


if __name__ == '__main__':
    sys.exit(main())
