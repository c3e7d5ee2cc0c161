"""Command-line entrypoint: configure logging and serve the app."""

import argparse
import logging
import sys

import uvicorn

from folio.config import LISTEN_HOST, LISTEN_PORT, get_settings
from folio.errors import ConfigInvalidError, ConfigMissingError
from folio.services.classifier import load_rules

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve mutual-fund allocations from Kite snapshots")
    parser.add_argument("--host", default=LISTEN_HOST, help=f"Listen host (default {LISTEN_HOST})")
    parser.add_argument("--port", type=int, default=LISTEN_PORT, help=f"Listen port (default {LISTEN_PORT})")
    parser.add_argument("--log-level", default=None, help="Override FOLIO_LOG_LEVEL")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging(args.log_level or "INFO")

    try:
        settings = get_settings()
        if settings.rules_file is not None:
            load_rules(settings.rules_file)
    except (ConfigMissingError, ConfigInvalidError) as e:
        logger.critical(f"fatal: {e}")
        return 1

    if args.log_level is None:
        logging.getLogger().setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    logger.info(f"listening on: {args.host}:{args.port}")
    uvicorn.run("folio.main:app", host=args.host, port=args.port, log_config=None)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
