"""
Entrypoint: load config, init logging, read the address file,
run the measurement pipeline and write the results as JSON.
"""

import argparse
import sys

import structlog

from .config import Config
from .errors import InputError, OutputError
from .logger import setup_logging
from .pipeline import LatencyPipeline
from .prober import DEFAULT_USER_AGENT, HTTPProber
from .storage import DEFAULT_OUTPUT, read_addresses, write_records

logger = structlog.get_logger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="httplatency",
        description="Measure HTTP(S) latency for every address in FILE",
    )
    parser.add_argument("input", metavar="FILE", help="file with one address per line")
    parser.add_argument(
        "-o", "--output",
        help=f"set the output filename. '{DEFAULT_OUTPUT}' will be used if none is provided",
    )
    parser.add_argument("--timeout", type=float, help="request deadline in seconds (default: none)")
    parser.add_argument("--connect-timeout", type=float, help="connect deadline in seconds")
    parser.add_argument("--workers", type=int, help="number of concurrent probes (default: 1)")
    parser.add_argument("--user-agent", help="User-Agent header to send")
    parser.add_argument("--config", help="path to a config.yaml")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    parser.add_argument("--log-format", choices=["console", "json"])

    return parser.parse_args(argv)


def _pick(value, default):
    return value if value is not None else default


def _optional_float(value):
    return float(value) if value is not None else None


def _prober_settings(args, config):
    """Merge flags over config values, coerced to the types the prober expects."""
    return {
        "user_agent": str(_pick(args.user_agent, config.prober.get('user_agent') or DEFAULT_USER_AGENT)),
        "timeout": _optional_float(_pick(args.timeout, config.prober.get('timeout'))),
        "connect_timeout": _optional_float(_pick(args.connect_timeout, config.prober.get('connect_timeout'))),
    }


def main(argv=None) -> int:
    args = parse_args(argv)
    config = Config(args.config)

    setup_logging(
        level=_pick(args.log_level, config.logging.get('level', 'INFO')),
        fmt=_pick(args.log_format, config.logging.get('format', 'console')),
    )
    print("HTTP(S) Latency tool")

    output = _pick(args.output, config.output.get('path') or DEFAULT_OUTPUT)
    try:
        workers = int(_pick(args.workers, config.pipeline.get('workers', 1)))
        prober_settings = _prober_settings(args, config)
    except (TypeError, ValueError) as e:
        logger.error("invalid_config", error=str(e))
        return 2

    if workers < 1:
        logger.error("invalid_workers", workers=workers)
        return 2

    try:
        addresses = read_addresses(args.input)

        with HTTPProber(**prober_settings) as prober:
            records = LatencyPipeline(prober, workers=workers).run(addresses)

        logger.debug("writing_output", path=output)
        write_records(output, records)

    except (InputError, OutputError) as e:
        logger.error("fatal_error", error=str(e))
        return 1

    except KeyboardInterrupt:
        logger.info("interrupted")
        return 130

    print("Exiting..")
    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
