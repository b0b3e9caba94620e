"""Request executor: one HTTP round trip per call, no mutation logic."""

import logging
import threading
from typing import Iterable, Mapping, Optional, Tuple

import requests
import urllib3
from urllib3 import HTTPHeaderDict

from nogo403.exceptions import TransportError
from nogo403.models import Header

# Disable SSL warnings
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

logger = logging.getLogger(__name__)


def wire_headers(defaults: Mapping[str, str], headers: Iterable[Header]) -> HTTPHeaderDict:
    """Header fields in the order they go on the wire.

    Session defaults are kept unless the variant sets the same name. A name the
    variant repeats is sent as separate fields, one per pair.
    """
    headers = list(headers)
    overridden = {name.lower() for name, _ in headers}

    wire = HTTPHeaderDict()
    for name, value in defaults.items():
        if name.lower() not in overridden:
            wire.add(name, value)
    for name, value in headers:
        wire.add(name, value)
    return wire


class Requester:
    """Performs single requests through a per-thread requests.Session"""

    def __init__(self, proxy: Optional[str] = None, timeout: float = 10,
                 allow_redirects: bool = True):
        self.proxies = {"http": proxy, "https": proxy} if proxy else None
        self.timeout = timeout
        self.allow_redirects = allow_redirects
        self._local = threading.local()

    def _session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.verify = False
            self._local.session = session
        return session

    def prepare(self, method: str, uri: str, headers: Iterable[Header]) -> requests.PreparedRequest:
        """Build the request exactly as described.

        The URL is put back after preparation because requests would otherwise
        resolve "." and ".." segments, and the headers are replaced so repeated
        names survive.
        """
        session = self._session()
        prepped = session.prepare_request(requests.Request(method, uri))
        prepped.url = uri
        prepped.headers = wire_headers(prepped.headers, headers)
        return prepped

    def execute(self, method: str, uri: str, headers: Iterable[Header]) -> Tuple[int, int]:
        """Send one request, return (status code, body length in bytes)"""
        if not method:
            raise ValueError("method must be a non-empty token")

        logger.debug("%s %s", method, uri)
        try:
            prepped = self.prepare(method, uri, headers)
            response = self._session().send(
                prepped,
                allow_redirects=self.allow_redirects,
                timeout=self.timeout,
                verify=False,
                proxies=self.proxies,
            )
        # http.client rejects unencodable or illegal header and URL text with these
        except (requests.exceptions.RequestException, ValueError, UnicodeError) as e:
            logger.debug("%s %s raised %s", method, uri, type(e).__name__)
            raise TransportError(method, uri, e) from e

        return response.status_code, len(response.content)
