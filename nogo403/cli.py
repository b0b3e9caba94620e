import argparse
import logging
import sys

import colorama
from colorama import Fore, Style

from nogo403 import __version__, reporter
from nogo403.dispatcher import DEFAULT_WORKERS
from nogo403.exceptions import ProbeError
from nogo403.models import DEFAULT_USER_AGENT, ProbeConfig
from nogo403.orchestrator import normalize_target, run_probe
from nogo403.strategies import STRATEGY_KEYS


def banner():
    """Display the tool banner"""
    print(f"{Fore.CYAN}╔════════════════════════════════════════════╗")
    print(f"║ {Fore.GREEN}nogo403 {__version__}{Fore.CYAN} - 401/403 bypass request mutator ║")
    print(f"╚════════════════════════════════════════════╝{Style.RESET_ALL}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nogo403",
        description="Probe a 401/403 endpoint with mutated requests")

    parser.add_argument("-u", "--uri", required=True, help="Target URL")
    parser.add_argument("-a", "--useragent", default="",
                        help=f"Custom User-Agent (default: {DEFAULT_USER_AGENT})")
    parser.add_argument("-p", "--proxy", default="",
                        help="Proxy URL or host:port (e.g. 127.0.0.1:8080)")

    # Strategies
    parser.add_argument("-m", "--methods", action="store_true", help="Sweep HTTP methods")
    parser.add_argument("-H", "--headers", action="store_true", help="Inject headers")
    parser.add_argument("-e", "--endpaths", action="store_true", help="Append path suffixes")
    parser.add_argument("-M", "--midpaths", action="store_true",
                        help="Inject fragments before the last path segment")
    parser.add_argument("-c", "--case", action="store_true",
                        help="Upper-case the last path segment one character at a time")

    # Options
    parser.add_argument("-T", "--threads", type=int, default=DEFAULT_WORKERS,
                        help=f"Concurrent requests per strategy, 0 for unbounded "
                             f"(default: {DEFAULT_WORKERS})")
    parser.add_argument("-t", "--timeout", type=float, default=10,
                        help="Request timeout in seconds")
    parser.add_argument("--fail-fast", action="store_true",
                        help="Abort the whole run on the first failed request")
    parser.add_argument("--no-redirects", action="store_true", help="Do not follow redirects")
    parser.add_argument("--payloads", metavar="DIR", help="Directory holding the payload lists")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    return parser


def config_from_args(args: argparse.Namespace) -> ProbeConfig:
    selected = tuple(key for key in STRATEGY_KEYS if getattr(args, key))
    return ProbeConfig(
        target=args.uri,
        user_agent=args.useragent,
        proxy=args.proxy,
        timeout=args.timeout,
        workers=args.threads,
        fail_fast=args.fail_fast,
        allow_redirects=not args.no_redirects,
        payload_dir=args.payloads,
        strategies=selected,
    )


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    colorama.init(autoreset=True)

    config = config_from_args(args)
    banner()

    try:
        print(f"{Fore.YELLOW}[*] Target:   {normalize_target(config.target)}")
        print(f"{Fore.YELLOW}[*] Threads:  {config.workers or 'unbounded'}{Style.RESET_ALL}")
        runs = run_probe(config)
    except ProbeError as e:
        print(f"{Fore.RED}[!] {e}{Style.RESET_ALL}")
        return 1
    except KeyboardInterrupt:
        print(f"\n{Fore.RED}[!] Interrupted.{Style.RESET_ALL}")
        return 130

    print()
    for key, results in runs.items():
        print(f"{Fore.YELLOW}[*] {key:<9} {reporter.summary(results)}{Style.RESET_ALL}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
