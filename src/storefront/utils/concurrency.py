"""Optimistic-concurrency retry for commands that move stock.

Protean versions every aggregate and refuses to save a copy whose version
is behind the stored one (ExpectedVersionError). Two checkouts racing for the
last unit of a product therefore cannot both commit: the loser's unit of
work rolls back, and re-running its command re-reads the stock and fails
validation instead of overselling.
"""

import structlog
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

logger = structlog.get_logger(__name__)

MAX_ATTEMPTS = 3


def process_with_retry(command, attempts: int = MAX_ATTEMPTS):
    """Process `command` synchronously, re-running it on a version conflict."""
    for attempt in range(1, attempts + 1):
        try:
            return current_domain.process(command, asynchronous=False)
        except ExpectedVersionError:
            if attempt == attempts:
                logger.error(
                    "Giving up after repeated version conflicts",
                    command=type(command).__name__,
                    attempts=attempts,
                )
                raise
            logger.warning(
                "Version conflict, retrying command",
                command=type(command).__name__,
                attempt=attempt,
            )
