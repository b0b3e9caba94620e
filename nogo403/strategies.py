"""Mutation strategies.

Each generator takes the normalized target, the baseline headers and a
PayloadSource and returns the list of VariantDescriptors to send. Nothing
here touches the network.
"""

import logging
from collections import namedtuple
from typing import List, Optional, Sequence
from urllib.parse import urlsplit

from nogo403.models import Header, VariantDescriptor
from nogo403.payloads import (END_PATHS, HEADERS, HTTP_METHODS, MID_PATHS,
                              PayloadSource, parse_header_line)

logger = logging.getLogger(__name__)


class PathSplit:
    """A target URI broken into an explicit list of path segments.

    ``index`` points at the final segment: the last one, or the one before
    the trailing slash. It is None when the path has no segment at all.
    """

    def __init__(self, uri: str):
        parts = urlsplit(uri)
        self.origin = f"{parts.scheme}://{parts.netloc}"
        self.query = parts.query
        self.segments = parts.path.split("/")
        self.trailing_slash = parts.path.endswith("/")

        idx = len(self.segments) - (2 if self.trailing_slash else 1)
        self.index: Optional[int] = idx if idx >= 0 and self.segments[idx] else None

    @property
    def segment(self) -> Optional[str]:
        if self.index is None:
            return None
        return self.segments[self.index]

    @property
    def base(self) -> str:
        """Everything up to and including the slash before the final segment"""
        if self.index is None:
            return self.origin + "/"
        return self.origin + "/".join(self.segments[:self.index]) + "/"

    def rebuild(self, text: str) -> str:
        """Put ``text`` where the final segment was"""
        uri = self.base + text
        if self.trailing_slash:
            uri += "/"
        if self.query:
            uri += "?" + self.query
        return uri


def split_target(uri: str) -> PathSplit:
    return PathSplit(uri)


# ---------------- GENERATORS -----------------

def method_variants(target: str, headers: Sequence[Header],
                    payloads: PayloadSource) -> List[VariantDescriptor]:
    """One request per method token against the unchanged target"""
    base = tuple(headers)
    return [VariantDescriptor(method, target, base, method)
            for method in payloads.load(HTTP_METHODS)]


def header_variants(target: str, headers: Sequence[Header],
                    payloads: PayloadSource) -> List[VariantDescriptor]:
    """GET with one extra header appended to the baseline set"""
    variants = []
    for line in payloads.load(HEADERS):
        pair = parse_header_line(line)
        if pair is None:
            continue
        name, value = pair
        variants.append(VariantDescriptor(
            "GET", target, tuple(headers) + (pair,), f"{name}: {value}"))
    return variants


def endpath_variants(target: str, headers: Sequence[Header],
                     payloads: PayloadSource) -> List[VariantDescriptor]:
    """Append each fragment to the target path verbatim, ahead of any query"""
    path, sep, query = target.partition("?")
    base = tuple(headers)
    variants = []
    for suffix in payloads.load(END_PATHS):
        uri = path + suffix + sep + query
        variants.append(VariantDescriptor("GET", uri, base, uri))
    return variants


def midpath_variants(target: str, headers: Sequence[Header],
                     payloads: PayloadSource) -> List[VariantDescriptor]:
    """Insert each fragment right before the final path segment"""
    split = split_target(target)
    if split.segment is None:
        logger.warning("No path segment in %s, skipping path prefix injection", target)
        return []

    base = tuple(headers)
    variants = []
    for prefix in payloads.load(MID_PATHS):
        uri = split.rebuild(prefix + split.segment)
        variants.append(VariantDescriptor("GET", uri, base, uri))
    return variants


def case_variants(target: str, headers: Sequence[Header],
                  payloads: PayloadSource) -> List[VariantDescriptor]:
    """Upper-case one character of the final segment per variant"""
    split = split_target(target)
    segment = split.segment
    if segment is None:
        logger.warning("No path segment in %s, skipping case permutation", target)
        return []

    base = tuple(headers)
    variants = []
    for pos, char in enumerate(segment):
        uri = split.rebuild(segment[:pos] + char.upper() + segment[pos + 1:])
        variants.append(VariantDescriptor("GET", uri, base, uri))
    return variants


Strategy = namedtuple("Strategy", ["key", "title", "generate"])

# Run order is fixed
STRATEGIES = (
    Strategy("methods", "HTTP METHODS", method_variants),
    Strategy("headers", "HEADERS", header_variants),
    Strategy("endpaths", "END PATHS", endpath_variants),
    Strategy("midpaths", "MID PATHS", midpath_variants),
    Strategy("case", "CAPITALIZATION", case_variants),
)

STRATEGY_KEYS = tuple(s.key for s in STRATEGIES)


def select_strategies(keys: Sequence[str]) -> List[Strategy]:
    """Strategies named in ``keys``, in run order; all of them if empty"""
    if not keys:
        return list(STRATEGIES)
    unknown = set(keys) - set(STRATEGY_KEYS)
    if unknown:
        raise ValueError(f"unknown strategies: {', '.join(sorted(unknown))}")
    return [s for s in STRATEGIES if s.key in keys]
