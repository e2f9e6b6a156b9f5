# backend/services/aggregation.py
"""
Every read view of the league (weekly points, standings, weekly progress)
is computed here from the two base tables, teams and matchups, loaded as
DataFrames. Routers never hand-roll their own aggregation.
"""

from typing import Any, Callable, Dict, List, Sequence

import numpy as np
import pandas as pd

from services.shaping import is_synthesized_matchup_id

TEAM_COLUMNS = ["team_id", "team_name", "roster_id", "owner_id", "avatar_id"]
TEAM_LOAD_COLUMNS = TEAM_COLUMNS + ["loaded_at"]
MATCHUP_COLUMNS = ["matchup_id", "week", "roster_id", "points", "loaded_at"]


# ============================================================
#  SHARED HELPERS
# ============================================================

def _ensure_columns(df: pd.DataFrame, cols: Sequence[str]) -> pd.DataFrame:
    df = df.copy() if df is not None else pd.DataFrame()
    for c in cols:
        if c not in df.columns:
            df[c] = None
    return df


def _roster_sort_key(series: pd.Series) -> pd.Series:
    # Numeric roster ids sort numerically ("2" before "10"); anything else goes last.
    return pd.to_numeric(series, errors="coerce").fillna(np.inf)


def _records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    df = df.astype(object).where(df.notna(), None)
    return df.to_dict(orient="records")


def latest_teams(teams: pd.DataFrame) -> pd.DataFrame:
    """
    Collapse duplicate team rows to one per roster_id. Name and owner come
    from the row with the latest loaded_at (rows loaded before that column
    existed count as oldest); avatar is the max non-null value.
    """
    df = _ensure_columns(teams, TEAM_LOAD_COLUMNS)
    df = df[df["roster_id"].notna()].copy()
    df["roster_id"] = df["roster_id"].astype(str)
    df["loaded_at"] = pd.to_datetime(df["loaded_at"], errors="coerce")
    df = df.sort_values("loaded_at", kind="stable", na_position="first")

    if df.empty:
        return df[TEAM_COLUMNS].reset_index(drop=True)

    avatars = df.dropna(subset=["avatar_id"]).groupby("roster_id")["avatar_id"].max()
    df = df.drop_duplicates("roster_id", keep="last").set_index("roster_id")
    df["avatar_id"] = avatars
    return df.reset_index()[TEAM_COLUMNS]


def latest_matchups(matchups: pd.DataFrame) -> pd.DataFrame:
    """
    One matchup row per (week, roster_id). When a roster shows up more than
    once in a week, the most recently loaded row wins.
    """
    df = _ensure_columns(matchups, MATCHUP_COLUMNS)
    df = df[df["roster_id"].notna()].copy()
    df["roster_id"] = df["roster_id"].astype(str)
    df["matchup_id"] = df["matchup_id"].astype(str)
    df["week"] = pd.to_numeric(df["week"], errors="coerce")
    df = df[df["week"].notna()].copy()
    df["week"] = df["week"].astype(int)
    df["points"] = pd.to_numeric(df["points"], errors="coerce").fillna(0.0)

    df = df.sort_values("loaded_at", kind="stable", na_position="first")
    df = df.drop_duplicates(["week", "roster_id"], keep="last")
    return df.reset_index(drop=True)


def compute_streak(results: Sequence[str]) -> str:
    """
    results are ordered most recent first, e.g. ["W", "W", "L", "W"] -> "W2".
    No games played yields "T0".
    """
    if not results:
        return "T0"

    current = results[0]
    count = 0
    for r in results:
        if r != current:
            break
        count += 1
    return f"{current}{count}"


def pair_matchups(matchups: pd.DataFrame) -> pd.DataFrame:
    """
    Join every team-week row to its opponent(s) sharing the same week and
    matchup_id, and label the outcome W / L / T. Rows with a synthesized
    matchup id had no opponent and never pair.
    """
    tp = latest_matchups(matchups)[["week", "matchup_id", "roster_id", "points"]]
    tp = tp[~tp["matchup_id"].map(is_synthesized_matchup_id).astype(bool)]
    paired = tp.merge(tp, on=["week", "matchup_id"], suffixes=("", "_opp"))
    paired = paired[paired["roster_id"] != paired["roster_id_opp"]].copy()

    paired["result"] = np.select(
        [paired["points"] > paired["points_opp"], paired["points"] < paired["points_opp"]],
        ["W", "L"],
        default="T",
    )
    return paired.rename(columns={"roster_id_opp": "opponent_roster_id", "points_opp": "opponent_points"})


# ============================================================
#  VIEWS
# ============================================================

def compute_week_points(teams: pd.DataFrame, matchups: pd.DataFrame, week: int) -> List[Dict[str, Any]]:
    """Every team with its points for one week (0 when it has no row), highest first."""
    base = latest_teams(teams)
    wk = latest_matchups(matchups)
    wk = wk[wk["week"] == int(week)][["roster_id", "points"]]

    df = base.merge(wk, on="roster_id", how="left")
    df["points"] = pd.to_numeric(df["points"], errors="coerce").fillna(0.0)
    df["_order"] = _roster_sort_key(df["roster_id"])
    df = df.sort_values(["points", "_order"], ascending=[False, True]).drop(columns="_order")

    return _records(df[["team_name", "roster_id", "team_id", "owner_id", "avatar_id", "points"]])


def compute_standings(teams: pd.DataFrame, matchups: pd.DataFrame) -> List[Dict[str, Any]]:
    """
    Wins / losses / ties from head-to-head pairs, total points scored in
    those paired games (weeks without an opponent add nothing), current
    streak, and rank (wins desc, total score desc, roster id asc).
    """
    base = latest_teams(teams)
    paired = pair_matchups(matchups)

    if paired.empty:
        counts = pd.DataFrame(columns=["wins", "losses", "ties"], index=pd.Index([], name="roster_id"))
        streaks = pd.Series(dtype=object, name="streak", index=pd.Index([], name="roster_id"))
    else:
        counts = paired.groupby(["roster_id", "result"]).size().unstack(fill_value=0)
        for col in ("W", "L", "T"):
            if col not in counts.columns:
                counts[col] = 0
        counts = counts.rename(columns={"W": "wins", "L": "losses", "T": "ties"})[["wins", "losses", "ties"]]

        streaks = (
            paired.sort_values("week", ascending=False, kind="stable")
            .groupby("roster_id")["result"]
            .apply(list)
            .map(compute_streak)
            .rename("streak")
        )

    totals = paired.groupby("roster_id")["points"].sum().rename("total_score")

    df = (
        base.merge(counts, left_on="roster_id", right_index=True, how="left")
        .merge(totals, left_on="roster_id", right_index=True, how="left")
        .merge(streaks, left_on="roster_id", right_index=True, how="left")
    )

    for col in ("wins", "losses", "ties"):
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0).astype(int)
    df["total_score"] = pd.to_numeric(df["total_score"], errors="coerce").fillna(0.0).round(2)
    df["streak"] = df["streak"].fillna("T0")

    df["_order"] = _roster_sort_key(df["roster_id"])
    df = df.sort_values(
        ["wins", "total_score", "_order", "roster_id"],
        ascending=[False, False, True, True],
        kind="stable",
    ).drop(columns="_order")
    df["rank"] = range(1, len(df) + 1)

    return _records(df[[
        "team_name", "roster_id", "team_id", "owner_id", "avatar_id",
        "wins", "losses", "ties", "total_score", "streak", "rank",
    ]])


def compute_weekly_progress(
    teams: pd.DataFrame,
    matchups: pd.DataFrame,
    max_week: int = 14,
) -> List[Dict[str, Any]]:
    """Per team: weekly and running-total points for weeks 1..max_week, teams sorted by name."""
    base = latest_teams(teams)
    tp = latest_matchups(matchups)
    tp = tp[(tp["week"] >= 1) & (tp["week"] <= int(max_week))]

    df = base.merge(tp[["roster_id", "week", "points"]], on="roster_id", how="inner")
    df = df.sort_values(["roster_id", "week"])
    df["cumulative_points"] = df.groupby("roster_id")["points"].cumsum().round(2)

    progress: Dict[str, Dict[str, Any]] = {}
    for row in _records(df):
        team = progress.setdefault(row["roster_id"], {
            "team_name": row["team_name"],
            "avatar_id": row["avatar_id"],
            "roster_id": row["roster_id"],
            "weeks": [],
        })
        team["weeks"].append({
            "week": int(row["week"]),
            "weekly_points": float(row["points"]),
            "cumulative_points": float(row["cumulative_points"]),
        })

    return sorted(progress.values(), key=lambda t: (t["team_name"] or "").lower())


# ============================================================
#  VIEW REGISTRY
# ============================================================

AGGREGATION_VIEWS: Dict[str, Callable[..., List[Dict[str, Any]]]] = {}


def register_view(name: str, func: Callable[..., List[Dict[str, Any]]]) -> None:
    AGGREGATION_VIEWS[name] = func


def aggregate(view: str, teams: pd.DataFrame, matchups: pd.DataFrame, **params: Any) -> List[Dict[str, Any]]:
    """
    Single entry point for the read path.
        aggregate("points", teams, matchups, week=3)
        aggregate("standings", teams, matchups)
        aggregate("progress", teams, matchups, max_week=14)
    """
    view = (view or "").lower().strip()
    if view not in AGGREGATION_VIEWS:
        raise ValueError(f"Unknown aggregation view: {view}")
    return AGGREGATION_VIEWS[view](teams, matchups, **params)


register_view("points", compute_week_points)
register_view("standings", compute_standings)
register_view("progress", compute_weekly_progress)
