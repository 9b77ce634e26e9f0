"""Progress reporting and cancellation for an import run."""

import logging

logger = logging.getLogger(__name__)


class ImportContext:
    """Observes an import run and carries its cancellation flag.

    The importer only reports through this object; nothing it records feeds
    back into the run except ``is_cancelled``.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self.last_status: str | None = None
        self.done = 0
        self.total = 0
        self.succeeded: list[str] = []
        self.failed: list[tuple[str, str]] = []

    def status(self, text: str) -> None:
        self.last_status = text
        logger.info(text)

    def report_progress(self, done: int, total: int) -> None:
        self.done = done
        self.total = total
        if done % 10 == 0 or done == total:
            logger.info(f"Progress: {done}/{total}")

    def report_note_success(self, name: str) -> None:
        self.succeeded.append(name)
        logger.debug(f"  Wrote {name}")

    def report_failed(self, name: str, error: Exception | str) -> None:
        self.failed.append((name, str(error)))
        logger.error(f"  Error: {name}: {error}")

    def cancel(self) -> None:
        self._cancelled = True

    def is_cancelled(self) -> bool:
        return self._cancelled
