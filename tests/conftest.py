import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from nogo403.exceptions import TransportError
from nogo403.payloads import PayloadSource


class FakeRequester:
    """Stands in for Requester; records every call, never touches the network"""

    def __init__(self, status=403, fail_on=()):
        self.status = status
        self.fail_on = set(fail_on)
        self.calls = []
        self._lock = threading.Lock()

    def execute(self, method, uri, headers):
        with self._lock:
            self.calls.append((method, uri, tuple(headers)))
        if uri in self.fail_on or method in self.fail_on:
            raise TransportError(method, uri, ConnectionError("connection refused"))
        return self.status, len(uri)


@pytest.fixture
def fake_requester():
    return FakeRequester()


@pytest.fixture
def write_payloads(tmp_path):
    """Write payload lists into a temp dir and return a PayloadSource over it"""
    def _write(**lists):
        for name, lines in lists.items():
            (tmp_path / name).write_text("\n".join(lines) + "\n", encoding="utf-8")
        return PayloadSource(tmp_path)
    return _write


@pytest.fixture
def payloads(write_payloads):
    return write_payloads(
        httpmethods=["GET", "POST", "PUT"],
        headers=["X-Forwarded-For 127.0.0.1", "X-Original-URL /admin"],
        endpaths=["/", "..;/", "%20"],
        midpaths=[";", "%2e", "..;/"],
    )


class RecordingHandler(BaseHTTPRequestHandler):
    """Answers every request with 403 and remembers what arrived on the wire"""

    def _record(self):
        self.server.received.append((self.command, self.path, self.headers))
        body = b"Forbidden"
        self.send_response(403)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    do_GET = do_POST = do_PUT = _record

    def log_message(self, format, *args):
        pass


@pytest.fixture
def http_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), RecordingHandler)
    server.received = []
    server.url = f"http://127.0.0.1:{server.server_address[1]}"
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()
