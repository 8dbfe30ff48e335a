import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

import structlog

from .fetchers import PointsFetcher
from .models import LeaderboardDocument, LeaderboardEntry
from .ranker import rank_entries
from .store import DocumentStore

log = structlog.get_logger()


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class UpdateReport:
    updated: int = 0
    unchanged: int = 0
    failed: List[str] = field(default_factory=list)


class LeaderboardUpdater:
    """
    Refreshes every entry's points, then re-ranks the whole board.

    Fetches run one at a time unless `concurrency` > 1. Each fetch only
    touches its own entry and ranking happens after all of them finish,
    so the resulting document does not depend on concurrency.
    """
    def __init__(self, fetch_timeout_sec: float = 30.0, concurrency: int = 1):
        self.fetch_timeout_sec = fetch_timeout_sec
        self.concurrency = max(1, concurrency)
        self.last_report = UpdateReport()

    async def _read_points(self, fetcher: PointsFetcher, entry: LeaderboardEntry) -> Optional[int]:
        try:
            return await asyncio.wait_for(fetcher.fetch(entry.profile_url), self.fetch_timeout_sec)
        except asyncio.TimeoutError:
            log.warning("Fetch timed out", name=entry.name, url=entry.profile_url,
                        timeout_sec=self.fetch_timeout_sec)
        except Exception as e:
            log.warning("Fetch raised", name=entry.name, url=entry.profile_url, err=str(e))
        return None

    async def _refresh(self, fetcher: PointsFetcher, entry: LeaderboardEntry) -> bool:
        log.info("Scraping profile", name=entry.name)
        points = await self._read_points(fetcher, entry)
        if isinstance(points, int) and not isinstance(points, bool) and points >= 0:
            entry.points = points
            log.info("Points updated", name=entry.name, points=points)
            return True
        log.warning("Could not update points, keeping previous value",
                    name=entry.name, points=entry.points)
        return False

    async def update(self, doc: LeaderboardDocument, fetcher: PointsFetcher) -> LeaderboardDocument:
        if self.concurrency == 1:
            ok = [await self._refresh(fetcher, e) for e in doc.entries]
        else:
            sem = asyncio.Semaphore(self.concurrency)

            async def bounded(entry: LeaderboardEntry) -> bool:
                async with sem:
                    return await self._refresh(fetcher, entry)

            ok = await asyncio.gather(*(bounded(e) for e in doc.entries))

        report = UpdateReport(updated=sum(ok), unchanged=len(ok) - sum(ok))
        report.failed = [e.name for e, good in zip(doc.entries, ok) if not good]

        doc.entries = rank_entries(doc.entries)
        doc.generated_at = _utc_now_iso()
        self.last_report = report
        return doc

    async def run_cycle(self, store: DocumentStore, fetcher: PointsFetcher) -> UpdateReport:
        doc = store.load()
        log.info("Leaderboard loaded", path=store.path, entries=len(doc.entries))
        doc = await self.update(doc, fetcher)
        store.save(doc)
        r = self.last_report
        log.info("Leaderboard updated", updated=r.updated, unchanged=r.unchanged, failed=r.failed)
        return r


def add_entry(doc: LeaderboardDocument, name: str, profile_url: str,
              points: Optional[int] = None) -> LeaderboardEntry:
    entry = LeaderboardEntry(name=name, profile_url=profile_url, points=points)
    doc.entries.append(entry)
    doc.entries = rank_entries(doc.entries)
    return entry


def remove_entry(doc: LeaderboardDocument, name: str) -> bool:
    kept = [e for e in doc.entries if e.name != name]
    if len(kept) == len(doc.entries):
        return False
    doc.entries = rank_entries(kept)
    return True
