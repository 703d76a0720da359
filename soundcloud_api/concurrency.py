"""
Fail-fast fan-out over a thread pool.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, Hashable, Mapping, Optional, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


def fan_out(
    jobs: Mapping[K, Callable[[], T]],
    max_workers: Optional[int] = None,
    thread_name_prefix: str = "soundcloud",
) -> Dict[K, T]:
    """
    Run every job concurrently and collect results by key.

    All jobs are submitted at once. The first job to raise, in completion
    order, wins: jobs that have not started are cancelled and its exception
    propagates. Jobs already running are left to finish and their results
    are discarded.

    Args:
        jobs: Callables keyed by the caller's ordering key (offset, index)
        max_workers: Pool size (default: one worker per job)
        thread_name_prefix: Prefix for worker thread names

    Returns:
        Results keyed like ``jobs``; the caller reassembles order from keys
    """
    if not jobs:
        return {}

    workers = max_workers or len(jobs)
    results: Dict[K, T] = {}

    executor = ThreadPoolExecutor(
        max_workers=workers, thread_name_prefix=thread_name_prefix
    )
    try:
        futures = {executor.submit(job): key for key, job in jobs.items()}
        for future in as_completed(futures):
            error = future.exception()
            if error is not None:
                pending = [f for f in futures if not f.done()]
                for f in pending:
                    f.cancel()
                logger.debug(
                    f"Job {futures[future]!r} failed, "
                    f"cancelling {len(pending)} outstanding job(s)"
                )
                raise error
            results[futures[future]] = future.result()
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    return results
