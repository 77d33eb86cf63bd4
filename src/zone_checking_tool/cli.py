import argparse
import json
import logging
from typing import Any, Dict, List, Optional

from colorama import init

from reporting.assembler import Assemble
from reporting.console import ConsoleReporter
from zoneconfig import ConfigError, load_config
from zonecheck import ZoneTester

"""
The command-line interface for the zone checker.
  1) Load and validate the declared zone configuration (load_config)
  2) Reconcile every declared record set with live DNS (ZoneTester.test)
  3) Print progress markers + messages, or the assembled JSON response (Assemble.build)

Exit codes: 0 = all record sets match, 1 = failures, 2 = unusable configuration.
"""


# Parse the command-line arguments
def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Check declared DNS records against live DNS")
    p.add_argument("config", help="Zone configuration (YAML/JSON, native or Route53 export)")
    p.add_argument("--zone", help="Zone name for a bare Route53 ResourceRecordSets export")
    p.add_argument(
        "-n", "--nameserver", dest="nameservers", action="append", default=None,
        help="Nameserver IP to query (repeatable). Default: system resolver, else 8.8.8.8/8.8.4.4",
    )
    p.add_argument("--timeout", type=float, default=5.0, help="Per-server DNS timeout (seconds)")
    p.add_argument("--lifetime", type=float, default=10.0, help="Total DNS lifetime per query (seconds)")
    p.add_argument("--json", dest="as_json", action="store_true", help="Output JSON")
    p.add_argument("--debug", action="store_true", help="Debug logging instead of progress markers")
    p.add_argument("--log-file", help="Save detailed logs to file")

    # Included in response["meta"] so you can track output versions.
    p.add_argument("--version", default="0.1", help="Version string included in output meta")

    return p.parse_args(argv)


def setup_logging(debug: bool = False, log_file: Optional[str] = None) -> logging.Logger:
    """Console handler only in debug mode; optional file handler."""
    logger = logging.getLogger("zonecheck")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if debug:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


def build_tester(args: argparse.Namespace, logger: logging.Logger, on_group: Any = None) -> ZoneTester:
    return ZoneTester.from_options(
        debug=args.debug,
        nameservers=args.nameservers,
        timeout=args.timeout,
        lifetime=args.lifetime,
        logger=logger,
        on_group=on_group,
    )


def main(argv: List[str] | None = None) -> int:
    """
    CLI entrypoint.

    Returns:
        Process exit code.
    """
    args = parse_args(argv)
    logger = setup_logging(args.debug, args.log_file)

    try:
        config = load_config(args.config, zone=args.zone)
    except ConfigError as e:
        print(f"Invalid configuration: {e}")
        return 2

    # JSON mode keeps stdout machine-readable: no progress markers.
    console = None if args.as_json else ConsoleReporter(debug=args.debug)
    if console:
        init()

    tester = build_tester(args, logger, on_group=console)
    report = tester.test(config)

    if args.as_json:
        meta: Dict[str, Any] = {"version": args.version, "source": "cli", "nameservers": args.nameservers or []}
        print(json.dumps(Assemble().build(target=args.config, report=report, meta=meta), indent=2))
    else:
        console.finish(report)

    return 0 if report.passed else 1


if __name__ == "__main__":
    raise SystemExit(main())
