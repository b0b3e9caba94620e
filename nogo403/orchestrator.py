"""Baseline setup and the sequential strategy run"""

import logging
import sys
from typing import Dict, List, Optional, TextIO
from urllib.parse import urlsplit, urlunsplit

from colorama import Fore, Style

from nogo403 import reporter
from nogo403.dispatcher import dispatch
from nogo403.exceptions import ConfigError, TargetError
from nogo403.models import DEFAULT_USER_AGENT, Header, ProbeConfig, ResultSet
from nogo403.payloads import PayloadSource, is_wire_safe
from nogo403.requester import Requester
from nogo403.strategies import select_strategies

logger = logging.getLogger(__name__)


def normalize_target(uri: str) -> str:
    """Absolute target URI with a trailing slash on paths shallower than two segments"""
    uri = uri.strip()
    if not uri.startswith(("http://", "https://")):
        uri = "http://" + uri

    parts = urlsplit(uri)
    if not parts.netloc:
        raise TargetError(f"no host in target '{uri}'")

    segments = [s for s in parts.path.split("/") if s]
    if len(segments) < 2 and not parts.path.endswith("/"):
        uri = urlunsplit(parts._replace(path=parts.path + "/"))
    return uri


def resolve_proxy(proxy: Optional[str]) -> Optional[str]:
    if not proxy:
        return None
    if "://" not in proxy:
        proxy = "http://" + proxy
    return proxy


def baseline_headers(user_agent: Optional[str] = None) -> List[Header]:
    user_agent = user_agent or DEFAULT_USER_AGENT
    if not is_wire_safe(user_agent):
        raise ConfigError(f"User-Agent {user_agent!r} cannot be sent in an HTTP header")
    return [("User-Agent", user_agent)]


def run_probe(config: ProbeConfig, requester: Optional[Requester] = None,
              payloads: Optional[PayloadSource] = None,
              out: Optional[TextIO] = None) -> Dict[str, ResultSet]:
    """Run the selected strategies one after another.

    Each strategy is generated, dispatched and rendered before the next one
    starts. PayloadError, and TransportError under fail-fast, propagate to the
    caller and end the run.
    """
    out = out or sys.stdout
    target = normalize_target(config.target)
    proxy = resolve_proxy(config.proxy)
    headers = baseline_headers(config.user_agent)

    if proxy:
        print(f"{Fore.MAGENTA}[*] USING PROXY: {proxy}{Style.RESET_ALL}", file=out)

    requester = requester or Requester(proxy=proxy, timeout=config.timeout,
                                       allow_redirects=config.allow_redirects)
    payloads = payloads or PayloadSource(config.payload_dir)

    runs: Dict[str, ResultSet] = {}
    for strategy in select_strategies(config.strategies):
        reporter.section(strategy.title, out)
        variants = strategy.generate(target, headers, payloads)
        logger.info("%s: %d variants against %s", strategy.title, len(variants), target)

        results = dispatch(variants, requester, workers=config.workers,
                           fail_fast=config.fail_fast, strategy=strategy.key)
        reporter.render(results, out)
        runs[strategy.key] = results

    return runs
