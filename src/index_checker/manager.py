"""In-memory link list: parsing, status checks, and derived views."""

import logging
from typing import Awaitable, Callable, Iterator, Optional

from .models import IndexStatus, LinkRecord, LinkStats
from .parser import parse_urls

logger = logging.getLogger(__name__)

StatusChecker = Callable[[str], Awaitable[IndexStatus]]

EXPORT_TOKENS = {
    IndexStatus.INDEXED: "INDEXED",
    IndexStatus.NOT_INDEXED: "NO",
    IndexStatus.CHECKING: "Checking",
    IndexStatus.PENDING: "Pending",
}

# Status a record falls back to when the checker fails or misbehaves.
FALLBACK_STATUS = IndexStatus.NOT_INDEXED


class LinkListManager:
    """Owns the ordered collection of LinkRecords and every mutation of it.

    The checker is any async callable mapping a normalized URL to
    ``INDEXED`` or ``NOT_INDEXED``. Everything runs on one event loop; the
    only suspension point is the checker call inside :meth:`check_one`, so
    results are written back only if the record still exists.

    ``checker`` may be None for a list that is only parsed and exported;
    checking such a list raises RuntimeError.
    """

    def __init__(self, checker: Optional[StatusChecker] = None) -> None:
        self.checker = checker
        self.input_text = ""
        self._records: list[LinkRecord] = []
        self._by_id: dict[str, LinkRecord] = {}
        self._sweeping = False
        self._cancel_requested = False

    # -- collection access ------------------------------------------------

    @property
    def records(self) -> tuple[LinkRecord, ...]:
        """Snapshot of the collection in display order."""
        return tuple(self._records)

    @property
    def is_sweeping(self) -> bool:
        return self._sweeping

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[LinkRecord]:
        return iter(self.records)

    def get(self, record_id: str) -> Optional[LinkRecord]:
        return self._by_id.get(record_id)

    # -- input ------------------------------------------------------------

    def parse_and_append(self, raw_text: str) -> list[LinkRecord]:
        """Parse pasted text and append one PENDING record per URL found.

        Blank input is a no-op. Lines that are not URLs are dropped silently
        and nothing is deduplicated, so pasting a URL twice tracks it twice.
        """
        if not raw_text.strip():
            return []

        new_records = [LinkRecord(original_url=url) for url in parse_urls(raw_text)]
        self._records.extend(new_records)
        for record in new_records:
            self._by_id[record.id] = record
        logger.info(f"Appended {len(new_records)} links (total: {len(self._records)})")
        return new_records

    def submit_input(self) -> list[LinkRecord]:
        """Append whatever is in ``input_text`` and clear it.

        The buffer is left untouched when it only holds whitespace.
        """
        if not self.input_text.strip():
            return []
        new_records = self.parse_and_append(self.input_text)
        self.input_text = ""
        return new_records

    # -- checks -----------------------------------------------------------

    async def check_one(self, record_id: str) -> Optional[LinkRecord]:
        """Run the checker for one record and store its verdict.

        Returns the updated record, or None if the id is unknown or the
        record was removed while the check was in flight.
        """
        if self.checker is None:
            raise RuntimeError("LinkListManager has no checker configured")

        record = self.get(record_id)
        if record is None:
            logger.debug(f"Skipping check for unknown link {record_id}")
            return None

        url = record.original_url
        record.status = IndexStatus.CHECKING
        logger.debug(f"Checking {url}")

        try:
            status = await self.checker(url)
        except Exception as e:
            logger.warning(f"Checker failed for {url}: {e!s}")
            status = FALLBACK_STATUS

        try:
            status = IndexStatus(status)
        except ValueError:
            logger.warning(f"Checker returned unknown status {status!r} for {url}")
            status = FALLBACK_STATUS
        if not status.is_terminal:
            logger.warning(f"Checker returned non-terminal status {status.value} for {url}")
            status = FALLBACK_STATUS

        # The record may have been removed (or the list cleared) meanwhile
        record = self.get(record_id)
        if record is None:
            logger.debug(f"Discarding result for removed link {url}")
            return None

        record.status = status
        logger.debug(f"{url} -> {status.value}")
        return record

    async def check_all(self) -> int:
        """Check every PENDING record, one at a time, in collection order.

        Records that are already checking or resolved are skipped, so a sweep
        can be rerun safely. Returns the number of checks performed.
        """
        if self.checker is None:
            raise RuntimeError("LinkListManager has no checker configured")
        if self._sweeping:
            logger.warning("Sweep already in progress")
            return 0

        self._sweeping = True
        self._cancel_requested = False
        checked = 0
        try:
            snapshot = list(self._records)
            logger.info(f"Starting sweep over {len(snapshot)} links")
            for record in snapshot:
                if self._cancel_requested:
                    logger.info("Sweep cancelled")
                    break
                # Status is read live: earlier checks or overrides may have changed it
                if record.status is not IndexStatus.PENDING:
                    continue
                if self.get(record.id) is None:
                    continue
                await self.check_one(record.id)
                checked += 1
            logger.info(f"Sweep finished: {checked} links checked")
        finally:
            self._sweeping = False
            self._cancel_requested = False
        return checked

    def cancel_sweep(self) -> None:
        """Stop a running sweep before its next check. The in-flight one completes."""
        if self._sweeping:
            self._cancel_requested = True

    # -- mutators ---------------------------------------------------------

    def set_status(self, record_id: str, status: IndexStatus) -> Optional[LinkRecord]:
        """Manually overwrite a record's status, bypassing the checker."""
        record = self.get(record_id)
        if record is None:
            return None
        record.status = status
        return record

    def remove(self, record_id: str) -> bool:
        record = self._by_id.pop(record_id, None)
        if record is None:
            return False
        self._records.remove(record)
        return True

    def clear(self) -> None:
        self._records.clear()
        self._by_id.clear()
        logger.info("Cleared all links")

    # -- derived views ----------------------------------------------------

    def stats(self) -> LinkStats:
        indexed = 0
        not_indexed = 0
        for record in self._records:
            if record.status is IndexStatus.INDEXED:
                indexed += 1
            elif record.status is IndexStatus.NOT_INDEXED:
                not_indexed += 1
        return LinkStats(total=len(self._records), indexed=indexed, not_indexed=not_indexed)

    def export_text(self) -> str:
        """One status token per record, newline separated, in display order."""
        return "\n".join(EXPORT_TOKENS[record.status] for record in self._records)
