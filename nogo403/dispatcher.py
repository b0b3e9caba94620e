"""Fan a strategy's variants out over a thread pool and collect the outcomes"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Sequence

from nogo403.exceptions import TransportError
from nogo403.models import Outcome, ResultSet, VariantDescriptor
from nogo403.requester import Requester

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 20


def run_variant(requester: Requester, variant: VariantDescriptor) -> Outcome:
    status_code, content_length = requester.execute(
        variant.method, variant.uri, variant.headers)
    return Outcome(variant.label, status_code, content_length)


def dispatch(variants: Sequence[VariantDescriptor], requester: Requester,
             workers: int = DEFAULT_WORKERS, fail_fast: bool = False,
             strategy: str = "") -> ResultSet:
    """Execute every variant concurrently and return once all have finished.

    ``workers`` caps the number of requests in flight; zero or less gives
    every variant its own worker. A transport failure is recorded as an
    error outcome with status 0, unless ``fail_fast`` is set, in which case
    the remaining variants are cancelled and the TransportError is raised.
    """
    results = ResultSet(strategy)
    if not variants:
        return results

    width = len(variants) if workers <= 0 else min(workers, len(variants))
    logger.debug("Dispatching %d variants on %d workers", len(variants), width)

    pool = ThreadPoolExecutor(max_workers=width)
    try:
        futures_map = {pool.submit(run_variant, requester, v): v for v in variants}

        for future in as_completed(futures_map):
            variant = futures_map[future]
            try:
                outcome = future.result()
            except TransportError as e:
                if fail_fast:
                    raise
                logger.warning("%s", e)
                outcome = Outcome(variant.label, 0, 0, error=str(e.cause))
            results.add(outcome)
    finally:
        # On the fail-fast path this drops whatever has not started yet
        pool.shutdown(wait=True, cancel_futures=True)

    return results
