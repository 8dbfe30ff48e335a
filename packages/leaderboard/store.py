import os, tempfile
import httpx
import structlog
from pydantic import ValidationError
from .models import LeaderboardDocument
from .errors import LoadError, WriteError

log = structlog.get_logger()

class DocumentStore:
    """Reads and fully rewrites the leaderboard JSON file at a configured path."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> LeaderboardDocument:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = f.read()
        except FileNotFoundError:
            log.info("Leaderboard file missing, starting fresh", path=self.path)
            return LeaderboardDocument()
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(self.path, str(e)) from e
        return parse_document(raw, self.path)

    def save(self, doc: LeaderboardDocument) -> None:
        folder = os.path.dirname(os.path.abspath(self.path))
        tmp = None
        try:
            os.makedirs(folder, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=folder, prefix=".leaderboard-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(doc.to_json())
            os.replace(tmp, self.path)
        except OSError as e:
            if tmp and os.path.exists(tmp):
                os.unlink(tmp)
            raise WriteError(self.path, str(e)) from e
        log.info("Leaderboard written", path=self.path, entries=len(doc.entries))

def parse_document(raw: str, source: str) -> LeaderboardDocument:
    try:
        return LeaderboardDocument.from_json(raw)
    except ValidationError as e:
        raise LoadError(source, f"invalid document ({e.error_count()} errors)") from e

async def load_document_from_url(url: str, timeout: float = 15.0) -> LeaderboardDocument:
    try:
        async with httpx.AsyncClient(timeout=timeout) as h:
            r = await h.get(url)
            r.raise_for_status()
    except httpx.HTTPError as e:
        raise LoadError(url, str(e)) from e
    return parse_document(r.text, url)
