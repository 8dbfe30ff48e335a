from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class LeaderboardEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    profile_url: str = ""
    points: Optional[int] = Field(default=None, ge=0)
    rank: Optional[int] = Field(default=None, ge=1)
    points_behind: Optional[int] = Field(default=None, ge=0, alias="pointsBehind")
    points_behind_raw: Optional[str] = Field(default=None, alias="pointsBehindRaw")

class LeaderboardDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    entries: list[LeaderboardEntry] = Field(default_factory=list)
    generated_at: Optional[str] = None

    def to_json(self) -> str:
        # wire names: profile_url / generated_at stay snake, deficit fields stay camel
        return self.model_dump_json(by_alias=True, indent=2)

    @classmethod
    def from_json(cls, raw: str) -> "LeaderboardDocument":
        return cls.model_validate_json(raw)
