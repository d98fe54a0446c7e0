#!/usr/bin/env python3
"""Command-line entry point: list mount points or relay corrections."""
from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from dataclasses import replace
from typing import BinaryIO, Callable, List, Optional, Sequence, TextIO

from .client import NtripClient
from .config import RelayConfig
from .logging_utils import setup_logging
from .models import ConnectionStatus, IoStatus, Location, NtripLogin
from .relay import CorrectionRelay

LOGGER = logging.getLogger(__name__)

YES = {"y", "yes"}
NO = {"n", "no"}

EXAMPLES = """\
examples:
    ntrip-relay -a rtk.ua -p 2101 -m CMR -u myname -pw myword -la 30 -lo -50
    ntrip-relay --address rtk.ua --port 2101 --mount CMR --user myname \\
        --password myword --latitude 30.32 --longitude -52.65
    ntrip-relay -a rtk.ua -p 2101 -g y
    ntrip-relay --address rtk.ua --port 2101 --user myname --password myword --get yes
"""


def build_parser(config: RelayConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ntrip-relay",
        description="Write RTK corrections from an NTRIP caster to standard output.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-a", "--address", default=config.address, metavar="SERVER",
                        help="NTRIP caster address")
    parser.add_argument("-p", "--port", type=int, default=config.port, metavar="PORT",
                        help="NTRIP caster port")
    parser.add_argument("-m", "--mount", dest="mountpoint", default=config.mountpoint,
                        metavar="MOUNTPOINT", help="NTRIP mount point")
    parser.add_argument("-u", "--user", dest="username", default=config.username,
                        metavar="USERNAME", help="NTRIP user name")
    parser.add_argument("-pw", "--password", default=config.password, metavar="PASSWORD",
                        help="NTRIP password")
    parser.add_argument("-la", "--latitude", type=float, default=config.latitude,
                        metavar="LATITUDE", help="user location latitude")
    parser.add_argument("-lo", "--longitude", type=float, default=config.longitude,
                        metavar="LONGITUDE", help="user location longitude")
    parser.add_argument("-el", "--elevation", type=float, default=config.elevation,
                        metavar="ELEVATION", help="user location elevation in metres")
    parser.add_argument("-g", "--get", type=str.lower, default="no", metavar="y/n",
                        help="retrieve mount points (y/n, yes/no)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def print_usage(parser: argparse.ArgumentParser) -> int:
    parser.print_help(sys.stderr)
    return 1


def show_mount_points(client: NtripClient, config: RelayConfig, out: TextIO) -> int:
    result = client.get_mount_points(
        config.address, config.port, config.username, config.password
    )
    if not result.ok:
        print("error retrieving mount points", file=sys.stderr)
        return 1
    for mount_point in result.mount_points or []:
        print(mount_point.name, file=out)
    return 0


def _install_signal_handlers(stop: Callable[[], None]) -> List[tuple]:
    if threading.current_thread() is not threading.main_thread():
        return []

    def _handle_signal(signum, frame):  # pragma: no cover - signal handling
        LOGGER.info("received signal %s, stopping", signum)
        stop()

    previous = []
    for sig in (signal.SIGTERM, signal.SIGINT):
        previous.append((sig, signal.signal(sig, _handle_signal)))
    return previous


def output_correction(
    client: NtripClient,
    login: NtripLogin,
    config: RelayConfig,
    sink: BinaryIO,
) -> int:
    previous = _install_signal_handlers(client.ticker.stop)
    try:
        status = client.connect(login)
        if status is ConnectionStatus.AUTH_FAILURE:
            print("authentication failure", file=sys.stderr)
            return 1
        if status is not ConnectionStatus.OK:
            print("connection error", file=sys.stderr)
            return 1

        relay = CorrectionRelay(
            client,
            login.location,
            sink,
            ticker=client.ticker,
            report_interval_ticks=config.report_interval_ticks,
        )
        result = relay.run()
    finally:
        for sig, handler in previous:
            if handler is not None:
                signal.signal(sig, handler)
        client.close()
    return 0 if result is IoStatus.SUCCESS else 1


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    stdout: Optional[TextIO] = None,
    sink: Optional[BinaryIO] = None,
    client_factory: Optional[Callable[[RelayConfig], NtripClient]] = None,
) -> int:
    arguments = list(sys.argv[1:] if argv is None else argv)
    config = RelayConfig.from_env()
    parser = build_parser(config)
    if not arguments:
        return print_usage(parser)

    args = parser.parse_args(arguments)
    config = replace(
        config,
        address=args.address,
        port=args.port,
        mountpoint=args.mountpoint,
        username=args.username,
        password=args.password,
        latitude=args.latitude,
        longitude=args.longitude,
        elevation=args.elevation,
    )
    setup_logging(
        logging.DEBUG if args.verbose else config.log_level,
        log_to_file=config.log_to_file,
    )
    client = (client_factory or NtripClient)(config)

    if args.get in YES:
        if not config.address or not config.port:
            return print_usage(parser)
        return show_mount_points(client, config, stdout or sys.stdout)
    if args.get not in NO:
        return print_usage(parser)

    if (
        config.latitude is None
        or config.longitude is None
        or not config.port
        or not config.address
        or not config.mountpoint
        or not config.username
        or not config.password
    ):
        return print_usage(parser)

    login = NtripLogin(
        address=config.address,
        port=config.port,
        mountpoint=config.mountpoint,
        username=config.username,
        password=config.password,
        location=Location(config.latitude, config.longitude, config.elevation),
    )
    return output_correction(client, login, config, sink or sys.stdout.buffer)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
