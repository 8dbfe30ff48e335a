# config environment
import os
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel

from .constants import DEFAULT_HTML_OUTPUT

class Cfg(BaseModel):
    leaderboard_file: str
    html_output: str
    fetcher: str
    fetch_timeout_sec: float
    fetch_concurrency: int
    debug_screenshot_dir: Optional[str] = None

def load_cfg(env_file: str) -> Cfg:
    load_dotenv(env_file)
    return Cfg(
        leaderboard_file=os.environ["LEADERBOARD_FILE"],
        html_output=os.environ.get("HTML_OUTPUT", DEFAULT_HTML_OUTPUT),
        fetcher=os.environ.get("FETCHER", "browser"),
        fetch_timeout_sec=float(os.environ.get("FETCH_TIMEOUT_SEC","30")),
        fetch_concurrency=int(os.environ.get("FETCH_CONCURRENCY","1")),
        debug_screenshot_dir=os.environ.get("DEBUG_SCREENSHOT_DIR") or None,
    )
