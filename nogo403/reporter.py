"""Terminal rendering of result sets"""

import sys
from typing import Iterable, Optional, TextIO

from colorama import Fore, Style

from nogo403.models import Outcome, ResultSet

SUCCESS = "success"
REDIRECT = "redirect"
CLIENT_ERROR = "client error"
SERVER_ERROR = "server error"

STATUS_BUCKETS = (
    (SUCCESS, frozenset(range(200, 300)), Fore.GREEN),
    (REDIRECT, frozenset({300, 301, 302, 303, 304, 307, 308}), Fore.YELLOW),
    (CLIENT_ERROR, frozenset(list(range(400, 409)) + [413, 429]), Fore.RED),
    (SERVER_ERROR, frozenset(list(range(500, 506)) + [511]), Fore.MAGENTA),
)

BUCKET_COLORS = {name: color for name, _, color in STATUS_BUCKETS}


def classify(status_code: int) -> Optional[str]:
    """Bucket name for a status code, None for codes outside every bucket"""
    for name, codes, _ in STATUS_BUCKETS:
        if status_code in codes:
            return name
    return None


def _status_cell(outcome: Outcome, width: int) -> str:
    if outcome.failed:
        return f"{Style.DIM}{'ERR':<{width}}{Style.RESET_ALL}"
    text = f"{outcome.status_code:<{width}}"
    bucket = classify(outcome.status_code)
    if bucket is None:
        return text
    return f"{BUCKET_COLORS[bucket]}{text}{Style.RESET_ALL}"


def section(title: str, out: Optional[TextIO] = None):
    print(f"\n{Fore.CYAN}[####] {title} [####]{Style.RESET_ALL}", file=out or sys.stdout)


def render(results: ResultSet, out: Optional[TextIO] = None):
    """Print one row per outcome, ordered by status code"""
    out = out or sys.stdout
    rows = results.sorted()
    if not rows:
        print(f"{Fore.YELLOW}[!] No variants were generated.{Style.RESET_ALL}", file=out)
        return

    status_width = max(len("ERR" if o.failed else str(o.status_code)) for o in rows)
    size_width = max(len(f"{o.content_length} bytes") for o in rows)

    for outcome in rows:
        size = f"{outcome.content_length} bytes"
        line = outcome.label
        if outcome.failed:
            line += f"  ({outcome.error})"
        print(f"{_status_cell(outcome, status_width)}  "
              f"{Fore.BLUE}{size:<{size_width}}{Style.RESET_ALL}  {line}", file=out)


def summary(results: Iterable[Outcome]) -> str:
    """One-line count of outcomes per bucket"""
    outcomes = list(results)
    counts = {name: 0 for name, _, _ in STATUS_BUCKETS}
    errors = 0
    for outcome in outcomes:
        if outcome.failed:
            errors += 1
            continue
        bucket = classify(outcome.status_code)
        if bucket:
            counts[bucket] += 1

    parts = [f"{len(outcomes)} variants"]
    parts.extend(f"{count} {name}" for name, count in counts.items() if count)
    if errors:
        parts.append(f"{errors} failed")
    return ", ".join(parts)
