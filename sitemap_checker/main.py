"""
1.0 Main Orchestrator Module
Checks the HTTP status of every URL in a sitemap.

Flow:
1. Collect the run configuration (CLI flags, then prompts for the rest)
2. Fetch and parse the sitemap (fatal on failure)
3. Check every URL with the worker pool, reporting progress live
4. Print a summary and optionally save both result lists as JSON

Usage:
    python -m sitemap_checker
    python -m sitemap_checker --sitemap-url https://example.com/sitemap.xml -c 5 --delay 1000
    python -m sitemap_checker --sitemap-url https://example.com/sitemap.xml --order random --no-save

Send SIGUSR1 to the process to pause or resume the workers.
"""

import argparse
import logging
import sys
from datetime import datetime, timezone
from functools import partial
from typing import List, Optional

from sitemap_checker.config import (
    CONFIG_FILE_PATH,
    TRAVERSAL_ORDERS,
    build_run_config,
    load_config,
    merge_defaults,
)
from sitemap_checker.pause import PauseToken, install_pause_signal
from sitemap_checker.progress import ConsoleProgressReporter, LogProgressReporter
from sitemap_checker.prompts import ask_configurations, ask_save_results
from sitemap_checker.results import print_summary, save_results
from sitemap_checker.sitemap_fetcher import SitemapFetcher, collect_page_urls
from sitemap_checker.sitemap_parser import SitemapParser
from sitemap_checker.url_validator import DEFAULT_USER_AGENT, URLValidator, create_session
from sitemap_checker.worker_pool import WorkerPool

logger = logging.getLogger(__name__)

LOG_FILE = "status_checker.log"


def setup_logging(console_reporter: bool) -> None:
    """
    1.1 Setup logging.

    The console reporter redraws the whole screen, so the stream handler is
    limited to warnings while it is active. The log file always gets INFO.
    """
    stream_handler = logging.StreamHandler()
    if console_reporter:
        stream_handler.setLevel(logging.WARNING)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(LOG_FILE),
            stream_handler,
        ]
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check HTTP status of every URL in a sitemap"
    )
    parser.add_argument(
        "--sitemap-url", "-u",
        default=None,
        help="Sitemap URL (prompted if omitted)"
    )
    parser.add_argument(
        "--concurrency", "-c",
        type=int,
        default=None,
        help="Number of concurrent workers, 1-14 (prompted if omitted)"
    )
    parser.add_argument(
        "--delay", "-d",
        type=int,
        default=None,
        help="Delay after each request in ms, > 250 (prompted if omitted)"
    )
    parser.add_argument(
        "--order", "-o",
        choices=TRAVERSAL_ORDERS,
        default=None,
        help="Traversal order (prompted if omitted)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: transport default)"
    )
    parser.add_argument(
        "--reporter",
        choices=["console", "log"],
        default="console",
        help="Progress display (default: console)"
    )
    parser.add_argument(
        "--config",
        default=CONFIG_FILE_PATH,
        help=f"Optional defaults file (default: {CONFIG_FILE_PATH})"
    )
    save_group = parser.add_mutually_exclusive_group()
    save_group.add_argument(
        "--save",
        dest="save",
        action="store_true",
        default=None,
        help="Save results without asking"
    )
    save_group.add_argument(
        "--no-save",
        dest="save",
        action="store_false",
        help="Do not save results"
    )
    parser.add_argument(
        "--non200-file",
        default=None,
        help="Output file for non-200 URLs"
    )
    parser.add_argument(
        "--all-file",
        default=None,
        help="Output file for all checked URLs"
    )
    return parser


def run(argv: Optional[List[str]] = None, input_func=input) -> int:
    """
    2.0 Run one sitemap check.

    Returns:
        Process exit code (0 on success, 1 on failure)
    """
    args = build_arg_parser().parse_args(argv)
    setup_logging(console_reporter=args.reporter == "console")

    logger.info("=" * 60)
    logger.info("Starting sitemap status check")
    logger.info(f"Run timestamp: {datetime.now(timezone.utc).isoformat()}")
    logger.info("=" * 60)

    # 2.1 Configuration
    defaults = merge_defaults(load_config(args.config))
    values = ask_configurations(
        defaults,
        provided={
            "sitemap_url": args.sitemap_url,
            "concurrency_limit": args.concurrency,
            "request_delay_ms": args.delay,
            "traversal_order": args.order,
        },
        input_func=input_func,
    )
    config = build_run_config(values)
    if config is None:
        logger.error("Invalid run configuration. Exiting.")
        return 1

    timeout = args.timeout if args.timeout is not None else defaults.get("timeout")
    user_agent = defaults.get("user_agent") or DEFAULT_USER_AGENT

    # 2.2 Sitemap
    fetcher = SitemapFetcher(config={"user_agent": user_agent, "timeout": timeout})
    urls = collect_page_urls(config.sitemap_url, fetcher, SitemapParser())
    if urls is None:
        logger.error(f"Failed to load sitemap {config.sitemap_url}. Exiting.")
        return 1
    logger.info(f"Gathered {len(urls)} page URLs from {config.sitemap_url}")

    # 2.3 Check URLs
    pause_token = PauseToken()
    install_pause_signal(pause_token)

    reporter = ConsoleProgressReporter() if args.reporter == "console" else LogProgressReporter()
    session = create_session(user_agent=user_agent, pool_size=config.concurrency_limit)
    pool = WorkerPool(
        validator_factory=partial(URLValidator, session=session, timeout=timeout),
        reporter=reporter,
        pause_token=pause_token,
    )
    try:
        all_records, non_200_records = pool.run(config, urls)
    finally:
        session.close()

    print_summary(pool.status_counts, non_200_records, config.sitemap_url)

    # 2.4 Save results
    if args.save is False:
        return 0

    if args.save:
        files = {
            "non200_file": args.non200_file or defaults["non200_file"],
            "all_file": args.all_file or defaults["all_file"],
        }
    else:
        files = ask_save_results(
            {
                "non200_file": args.non200_file or defaults["non200_file"],
                "all_file": args.all_file or defaults["all_file"],
            },
            input_func=input_func,
        )

    if files:
        save_results(all_records, non_200_records, files["non200_file"], files["all_file"])
        print("Results saved.")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """3.0 CLI entry point. Always ends with the exit message."""
    exit_code = 1
    try:
        exit_code = run(argv)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
    except Exception as e:
        logger.error(f"Error: {type(e).__name__}: {e}")
        logger.exception("Full traceback:")
    finally:
        print("Exiting...")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
