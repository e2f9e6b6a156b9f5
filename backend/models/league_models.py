from pydantic import BaseModel
from typing import Any, List, Literal, Optional


class TeamPoints(BaseModel):
    team_name: str
    roster_id: str
    team_id: Optional[str] = None
    owner_id: Optional[str] = None
    avatar_id: Optional[str] = None
    points: float = 0.0
    is_real_team: bool = False


class StandingsEntry(BaseModel):
    team_name: str
    roster_id: str
    team_id: Optional[str] = None
    owner_id: Optional[str] = None
    avatar_id: Optional[str] = None
    wins: int = 0
    losses: int = 0
    ties: int = 0
    total_score: float = 0.0
    streak: str = "T0"
    rank: int
    is_real_team: bool = False


class WeekProgress(BaseModel):
    week: int
    weekly_points: float
    cumulative_points: float


class TeamProgress(BaseModel):
    team_name: str
    roster_id: str
    avatar_id: Optional[str] = None
    weeks: List[WeekProgress] = []


class LeagueInfo(BaseModel):
    name: str
    season: str
    status: str
    total_teams: int
    league_id: Optional[str] = None


# Every read endpoint answers with one of these. "fallback" means the data
# is placeholder content, not what is stored in the warehouse.
class TaggedResult(BaseModel):
    kind: Literal["real", "fallback"]
    data: Any
    reason: Optional[str] = None


class TeamPointsResult(TaggedResult):
    week: int
    data: List[TeamPoints]


class StandingsResult(TaggedResult):
    data: List[StandingsEntry]


class ProgressResult(TaggedResult):
    data: List[TeamProgress]


class LeagueInfoResult(TaggedResult):
    data: LeagueInfo


class LoadReport(BaseModel):
    week: int
    teams: int
    players: int
    matchups: int
