from datetime import date
from typing import Protocol

from geo_visibility.data import AnalysisRecord, Citation, TrustListing, VisibilitySnapshot


class CheckStore(Protocol):
    """Persistence the engine reads from and writes to.

    Every method may raise; the engine treats any exception from a write as
    a persistence error and keeps going.
    """

    async def get_running_score(self, site_id: str) -> int | None:
        """Current running score for a site, or None if never scored."""
        ...

    async def set_running_score(self, site_id: str, score: int) -> None: ...

    async def citation_exists(self, site_id: str, platform: str, query: str) -> bool:
        """Whether a citation row already exists for (site, platform, query)."""
        ...

    async def insert_citation(self, citation: Citation) -> None: ...

    async def upsert_snapshot(self, snapshot: VisibilitySnapshot) -> None:
        """Insert or replace the snapshot keyed on (site, date)."""
        ...

    async def recent_snapshots(self, site_id: str, *, limit: int = 2) -> list[VisibilitySnapshot]:
        """Most recent snapshots for a site, newest first."""
        ...

    async def upsert_trust_listing(self, site_id: str, listing: TrustListing) -> None:
        """Insert or replace the listing keyed on (site, source domain)."""
        ...

    async def save_analysis(self, record: AnalysisRecord) -> None: ...

    async def recent_analyses(self, site_id: str, *, limit: int = 3) -> list[AnalysisRecord]:
        """Most recent analysis records for a site, newest first."""
        ...

    async def addressed_queries(self, site_id: str) -> set[str]:
        """Lowercased, trimmed queries that already have a remediation page."""
        ...


def snapshot_key(site_id: str, snapshot_date: date) -> tuple[str, date]:
    return (site_id, snapshot_date)
