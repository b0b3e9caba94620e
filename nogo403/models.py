from dataclasses import dataclass, field
from threading import Lock
from typing import Iterator, List, Optional, Sequence, Tuple

Header = Tuple[str, str]

DEFAULT_USER_AGENT = "nogo403/0.2"


# ---------------- DATA MODELS -----------------
@dataclass(frozen=True)
class VariantDescriptor:
    """One mutated request, fully specified"""
    method: str
    uri: str
    headers: Tuple[Header, ...]
    label: str


@dataclass
class Outcome:
    """Result of executing one variant"""
    label: str
    status_code: int
    content_length: int
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class ResultSet:
    """Outcomes of one strategy run.

    Appends are serialized so several workers may report into the same set.
    """

    def __init__(self, strategy: str = ""):
        self.strategy = strategy
        self._outcomes: List[Outcome] = []
        self._lock = Lock()

    def add(self, outcome: Outcome):
        """Thread-safe append"""
        with self._lock:
            self._outcomes.append(outcome)

    def __len__(self) -> int:
        with self._lock:
            return len(self._outcomes)

    def __iter__(self) -> Iterator[Outcome]:
        with self._lock:
            snapshot = list(self._outcomes)
        return iter(snapshot)

    def sorted(self) -> List[Outcome]:
        return sorted(self, key=lambda o: (o.status_code, o.label))

    def errors(self) -> List[Outcome]:
        return [o for o in self if o.failed]


@dataclass
class ProbeConfig:
    """Everything a probe run needs, built from the command line"""
    target: str
    user_agent: str = ""
    proxy: str = ""
    timeout: float = 10
    workers: int = 20
    fail_fast: bool = False
    allow_redirects: bool = True
    payload_dir: Optional[str] = None
    strategies: Sequence[str] = field(default_factory=tuple)
