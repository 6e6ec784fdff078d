"""Dict-backed store used by the CLI and the test suite."""

from datetime import date

from geo_visibility.data import AnalysisRecord, Citation, TrustListing, VisibilitySnapshot
from geo_visibility.store.base import snapshot_key


class InMemoryCheckStore:
    """Keeps everything in process memory.

    Args:
        addressed: Optional mapping of site ID to queries that already have
            a remediation page.
    """

    def __init__(self, addressed: dict[str, set[str]] | None = None) -> None:
        self.running_scores: dict[str, int] = {}
        self.citations: list[Citation] = []
        self.snapshots: dict[tuple[str, date], VisibilitySnapshot] = {}
        self.trust_listings: dict[tuple[str, str], TrustListing] = {}
        self.analyses: list[AnalysisRecord] = []
        self._addressed = {
            site_id: {q.strip().lower() for q in queries}
            for site_id, queries in (addressed or {}).items()
        }

    async def get_running_score(self, site_id: str) -> int | None:
        return self.running_scores.get(site_id)

    async def set_running_score(self, site_id: str, score: int) -> None:
        self.running_scores[site_id] = score

    async def citation_exists(self, site_id: str, platform: str, query: str) -> bool:
        return any(
            c.site_id == site_id and c.platform == platform and c.query == query
            for c in self.citations
        )

    async def insert_citation(self, citation: Citation) -> None:
        self.citations.append(citation)

    async def upsert_snapshot(self, snapshot: VisibilitySnapshot) -> None:
        self.snapshots[snapshot_key(snapshot.site_id, snapshot.snapshot_date)] = snapshot

    async def recent_snapshots(self, site_id: str, *, limit: int = 2) -> list[VisibilitySnapshot]:
        rows = [s for s in self.snapshots.values() if s.site_id == site_id]
        rows.sort(key=lambda s: s.snapshot_date, reverse=True)
        return rows[:limit]

    async def upsert_trust_listing(self, site_id: str, listing: TrustListing) -> None:
        self.trust_listings[(site_id, listing.source_domain)] = listing

    async def save_analysis(self, record: AnalysisRecord) -> None:
        self.analyses.append(record)

    async def recent_analyses(self, site_id: str, *, limit: int = 3) -> list[AnalysisRecord]:
        rows = [a for a in self.analyses if a.site_id == site_id]
        # sorted() is stable, so records saved later win ties on created_at
        rows = sorted(reversed(rows), key=lambda a: a.created_at, reverse=True)
        return rows[:limit]

    async def addressed_queries(self, site_id: str) -> set[str]:
        return set(self._addressed.get(site_id, set()))

    def mark_addressed(self, site_id: str, query: str) -> None:
        """Record that a remediation page now covers ``query``."""
        self._addressed.setdefault(site_id, set()).add(query.strip().lower())
