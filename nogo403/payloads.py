"""Payload lists: read-only sequences of mutation tokens loaded from disk"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from nogo403.exceptions import PayloadError
from nogo403.models import Header

logger = logging.getLogger(__name__)

DEFAULT_PAYLOAD_DIR = Path(__file__).resolve().parent / "payloads"

HTTP_METHODS = "httpmethods"
HEADERS = "headers"
END_PATHS = "endpaths"
MID_PATHS = "midpaths"

# "#" on its own is a valid fragment payload, so only "# ..." is a comment
COMMENT_PREFIX = "# "


class PayloadSource:
    """Loads named payload lists from a directory, caching each list once read"""

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        self.directory = Path(directory) if directory else DEFAULT_PAYLOAD_DIR
        self._cache: Dict[str, List[str]] = {}

    def load(self, name: str) -> List[str]:
        if name in self._cache:
            return list(self._cache[name])

        path = self.directory / name
        try:
            with open(path, "r", encoding="utf-8") as fh:
                lines = [line.strip() for line in fh]
        except FileNotFoundError:
            raise PayloadError(name, f"not found in {self.directory}")
        except (OSError, UnicodeDecodeError) as e:
            raise PayloadError(name, str(e)) from e

        entries = [line for line in lines if line and not line.startswith(COMMENT_PREFIX)]
        logger.debug("Loaded %d entries from %s", len(entries), path)
        self._cache[name] = entries
        return list(entries)


def is_wire_safe(text: str) -> bool:
    """True if text can be written into an HTTP/1.1 header field"""
    try:
        text.encode("latin-1")
    except UnicodeEncodeError:
        return False
    return not any(c in text for c in "\r\n\0")


def parse_header_line(line: str) -> Optional[Header]:
    """Split a "Name value" payload line; None if it is missing a field or cannot be sent"""
    parts = line.split(" ", 1)
    if len(parts) != 2 or not parts[0] or not parts[1].strip():
        logger.warning("Skipping malformed header payload: %r", line)
        return None
    name, value = parts[0], parts[1].strip()
    if not is_wire_safe(name + value):
        logger.warning("Skipping header payload with characters HTTP cannot carry: %r", line)
        return None
    return name, value
