from datetime import UTC, datetime


class SystemClock:
    """Implements Clock protocol with the wall clock."""

    def now(self) -> datetime:
        return datetime.now(UTC)
