from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from mobile_perf.app.configuration import load_test_options
from mobile_perf.automation.driver.capabilities import build_capabilities
from mobile_perf.exceptions import ConfigurationError

logger = logging.getLogger("mobile_perf.cli")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="mobile-perf", description="Mobile performance test bootstrap")
    parser.add_argument("--config", type=Path, default=None, help="Test config file (defaults to $TEST_CONFIG or ./tests/android.yml)")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    show_parser = subparsers.add_parser("show", help="Print the loaded test options as JSON")
    show_parser.add_argument("--no-resolve", dest="resolve", action="store_false", help="Skip resolving and downloading app files")

    subparsers.add_parser("capabilities", help="Print the base Appium capabilities (apps excluded) as JSON")
    subparsers.add_parser("session", help="Open an Appium session for the configured apps and close it again")

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(name)s - %(message)s")

    try:
        if args.command == "show":
            return _handle_show(args.config, args.resolve)
        if args.command == "capabilities":
            return _handle_capabilities(args.config)
        if args.command == "session":
            return _handle_session(args.config)
    except ConfigurationError as exc:
        logger.error("Invalid test configuration: %s", exc)
        return 2
    except FileNotFoundError as exc:
        logger.error("App file not found: %s", exc)
        return 2
    parser.print_help()
    return 1


def _handle_show(config: Optional[Path], resolve: bool) -> int:
    options = load_test_options(config, resolve_apps=resolve)
    print(json.dumps(options.summary(), indent=2))
    return 0


def _handle_capabilities(config: Optional[Path]) -> int:
    options = load_test_options(config, resolve_apps=False)
    caps = build_capabilities(options.server, options.platform, options.ci)
    print(json.dumps(caps, indent=2))
    return 0


def _handle_session(config: Optional[Path]) -> int:
    from mobile_perf.automation.driver import create_driver

    options = load_test_options(config)
    try:
        driver = create_driver(options)
    except ConfigurationError:
        raise
    except Exception as exc:
        logger.exception("Unable to start Appium session: %s", exc)
        return 3
    try:
        logger.info("Started Appium session %s", driver.session_id)
    finally:
        driver.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
