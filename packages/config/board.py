# behaviour tuning (yaml)
import yaml
from pydantic import BaseModel, Field

from .constants import POINTS_SELECTOR, USER_AGENT


class FetcherCfg(BaseModel):
    selector: str = POINTS_SELECTOR
    user_agent: str = USER_AGENT
    headless: bool = True
    wait_until: str = "networkidle"


class SortCfg(BaseModel):
    parse_k_suffix: bool = False


class BoardCfg(BaseModel):
    fetcher: FetcherCfg = Field(default_factory=FetcherCfg)
    sort: SortCfg = Field(default_factory=SortCfg)


def load_board_cfg(path: str) -> BoardCfg:
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except FileNotFoundError:
        return BoardCfg()
    return BoardCfg(**raw)
