from datetime import datetime, timezone


class SystemClock:
    """Wall clock handing out ISO-8601 UTC timestamps"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def now_iso(self) -> str:
        """e.g. 2025-01-03T06:05:09.123Z"""
        return (
            self.now().isoformat(timespec="milliseconds").replace("+00:00", "Z")
        )
