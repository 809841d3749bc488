"""Command line entry point: ``python -m teslamate_telegram``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys

from teslamate_telegram.app import run
from teslamate_telegram.config import BotConfig
from teslamate_telegram.exceptions import TeslaMateTelegramError

_logger = logging.getLogger("teslamate_telegram")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="teslamate-telegram",
        description="Send TeslaMate charging and driving summaries to Telegram.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument("--mqtt-host", default=None, help="MQTT broker host (default: $MQTT_HOST or 'mqtt').")
    parser.add_argument("--mqtt-port", type=int, default=None, help="MQTT broker port (default: 1883).")
    parser.add_argument(
        "--debounce",
        type=float,
        default=None,
        help="Seconds of quiet before a vehicle's updates are evaluated (0 = every update).",
    )
    return parser.parse_args(argv)


async def _main(config: BotConfig) -> None:
    loop = asyncio.get_running_loop()
    stop = asyncio.Event()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:  # pragma: no cover - Windows
            pass
    await run(config, stop)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, object] = {}
    if args.mqtt_host is not None:
        overrides["mqtt_host"] = args.mqtt_host
    if args.mqtt_port is not None:
        overrides["mqtt_port"] = args.mqtt_port
    if args.debounce is not None:
        overrides["debounce_seconds"] = args.debounce

    try:
        config = BotConfig.from_env(**overrides)
        asyncio.run(_main(config))
    except TeslaMateTelegramError as exc:
        _logger.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
