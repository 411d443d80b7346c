"""Apply one operation to many message ids and aggregate the failures."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from mailbridge.core.errors import BatchPartialFailure

logger = logging.getLogger(__name__)


def _run(op: Callable[[str], object], message_id: str) -> Exception | None:
    try:
        op(message_id)
    except Exception as e:
        return e
    return None


def batch_operation(
    ids: list[str],
    op: Callable[[str], object],
    label: str,
    *,
    max_workers: int = 1,
) -> None:
    """Run ``op`` for every id, never stopping at the first failure.

    Args:
        ids: Message ids, processed (or at least reported) in this order.
        op: Single-message operation. Cancellation is its own concern.
        label: Operation name used in the aggregate error, e.g. "trash".
        max_workers: Above 1, ids are dispatched through a bounded thread
            pool. Failures are still reported in input order.

    Raises:
        BatchPartialFailure: If one or more ids failed.
    """
    if not ids:
        return

    if max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(lambda message_id: _run(op, message_id), ids))
    else:
        results = [_run(op, message_id) for message_id in ids]

    failures = [
        (message_id, error)
        for message_id, error in zip(ids, results)
        if error is not None
    ]

    if failures:
        logger.warning(
            "Batch %s: %d of %d messages failed", label, len(failures), len(ids)
        )
        raise BatchPartialFailure(label, failures)

    logger.info("Batch %s: %d messages", label, len(ids))
