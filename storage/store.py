from __future__ import annotations

"""Parquet-backed store using pandas + pyarrow.

Two kinds of table:
- item pools, one file per scope (e.g. `vocab-food`, `deck-french-basics`),
  overwritten on every save
- session history, one summary row per completed session, append-only
"""

import re
from pathlib import Path
from typing import Any, Iterable, List, Optional

import numpy as np
import pandas as pd

from .schema import DTYPES, ITEM_DTYPES, MODULES, ItemRecord, SessionRow

POOLS_DIR = "pools"
SESSIONS_FILE = "sessions.parquet"

_SCOPE_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


def _empty_df(dtypes: dict) -> pd.DataFrame:
    return pd.DataFrame({k: pd.Series(dtype=v) for k, v in dtypes.items()})


def _fix_dtypes(df: pd.DataFrame, dtypes: dict) -> pd.DataFrame:
    for col, dt in dtypes.items():
        if col not in df.columns:
            df[col] = pd.Series(index=df.index, dtype=dt)
            continue
        if isinstance(dt, pd.DatetimeTZDtype):
            df[col] = pd.to_datetime(df[col], utc=True)
        df[col] = df[col].astype(dt)
    return df[list(dtypes.keys())]


def pool_path(scope: str, data_dir: Path) -> Path:
    if not _SCOPE_RE.match(scope or ""):
        raise ValueError(f"Invalid pool scope: {scope!r}")
    return Path(data_dir) / POOLS_DIR / f"{scope}.parquet"


def init_store(data_dir: Path) -> None:
    """Ensure the data directory, pools folder and an empty sessions table exist."""
    data_dir = Path(data_dir)
    (data_dir / POOLS_DIR).mkdir(parents=True, exist_ok=True)
    sessions = data_dir / SESSIONS_FILE
    if not sessions.exists():
        _empty_df(DTYPES).to_parquet(sessions, engine="pyarrow", compression="zstd", index=False)


# --- Item pools ---

def validate_items(records: Iterable[Any]) -> pd.DataFrame:
    """Validate item records and return a DataFrame with pool dtypes."""
    rows = [r if isinstance(r, ItemRecord) else ItemRecord.model_validate(r) for r in records]
    if not rows:
        return _empty_df(ITEM_DTYPES)
    ids = [r.id for r in rows]
    if len(set(ids)) != len(ids):
        raise ValueError("duplicate item ids in pool")
    df = pd.DataFrame([r.model_dump() for r in rows])
    return _fix_dtypes(df, ITEM_DTYPES)


def save_pool(scope: str, records: Iterable[Any], data_dir: Path) -> None:
    """Overwrite the pool file for `scope`. Saving the same records twice is a no-op in effect."""
    f = pool_path(scope, data_dir)
    f.parent.mkdir(parents=True, exist_ok=True)
    df = validate_items(records)
    tmp = f.with_suffix(".parquet.tmp")
    df.to_parquet(tmp, engine="pyarrow", compression="zstd", index=False)
    tmp.replace(f)


def _none_if_na(v: Any) -> Any:
    if v is None or v is pd.NaT:
        return None
    try:
        if pd.isna(v):
            return None
    except (TypeError, ValueError):
        pass
    if isinstance(v, pd.Timestamp):
        return v.to_pydatetime()
    if isinstance(v, np.generic):
        return v.item()
    return v


def load_pool(scope: str, data_dir: Path) -> List[ItemRecord]:
    """Load saved items for `scope`.

    Raises FileNotFoundError when nothing was saved; any decode or validation
    problem surfaces as ValueError/OSError for the caller to degrade on.
    """
    f = pool_path(scope, data_dir)
    if not f.exists():
        raise FileNotFoundError(f)
    df = pd.read_parquet(f, engine="pyarrow")
    missing = [c for c in ITEM_DTYPES if c not in df.columns and c != "last_reviewed"]
    if missing:
        raise ValueError(f"pool file missing columns: {missing}")
    df = _fix_dtypes(df, ITEM_DTYPES)
    out: List[ItemRecord] = []
    for row in df.to_dict(orient="records"):
        out.append(ItemRecord.model_validate({k: _none_if_na(v) for k, v in row.items()}))
    return out


def list_scopes(data_dir: Path, prefix: str = "") -> List[str]:
    d = Path(data_dir) / POOLS_DIR
    if not d.exists():
        return []
    return sorted(p.stem for p in d.glob("*.parquet") if p.stem.startswith(prefix))


def delete_pool(scope: str, data_dir: Path) -> None:
    f = pool_path(scope, data_dir)
    if f.exists():
        f.unlink()


# --- Session history ---

def validate_records(records: list[SessionRow]) -> pd.DataFrame:
    """Validate SessionRow records and return a DataFrame with session dtypes."""
    if not isinstance(records, list):
        raise TypeError("records must be a list[SessionRow]")
    rows = [SessionRow.model_validate(r) if not isinstance(r, SessionRow) else r for r in records]
    if not rows:
        return _empty_df(DTYPES)
    df = pd.DataFrame([r.model_dump() for r in rows])
    return _fix_dtypes(df, DTYPES)


def append_session_rows(df_new: pd.DataFrame, data_dir: Path) -> None:
    """Append rows to the sessions table.

    Reads existing, concatenates, fixes dtypes, removes exact duplicates, and writes back.
    """
    f = Path(data_dir) / SESSIONS_FILE
    if f.exists():
        df_old = pd.read_parquet(f, engine="pyarrow")
    else:
        f.parent.mkdir(parents=True, exist_ok=True)
        df_old = _empty_df(DTYPES)
    df_new = _fix_dtypes(df_new.copy(), DTYPES)
    if df_old.empty:
        combined = df_new
    else:
        combined = pd.concat([_fix_dtypes(df_old, DTYPES), df_new], ignore_index=True)
    combined = _fix_dtypes(combined, DTYPES)
    combined = combined.drop_duplicates()  # exact duplicate rows only
    combined.to_parquet(f, engine="pyarrow", compression="zstd", index=False)


def load_sessions(data_dir: Path) -> pd.DataFrame:
    """Load the sessions table with dtypes fixed and an `acc` column (C / Q, 0 when Q is 0)."""
    f = Path(data_dir) / SESSIONS_FILE
    if not f.exists():
        return _empty_df(DTYPES).assign(acc=pd.Series(dtype="float32"))
    df = _fix_dtypes(pd.read_parquet(f, engine="pyarrow"), DTYPES)
    q = df["Q"].astype("float32")
    acc = (df["C"].astype("float32") / q.where(q > 0, other=1.0)).where(q > 0, other=0.0)
    df["acc"] = acc.astype("float32")
    return df


def query_trend(df: pd.DataFrame, *, module: str, mode: Optional[str] = None) -> pd.DataFrame:
    """Filter rows for a module (and optional mode) and sort by session_start."""
    if module not in MODULES:
        raise ValueError(f"Unknown module: {module}")
    mask = df["module"].astype("string") == module
    if mode is not None:
        mask &= df["mode"].astype("string") == mode
    return df[mask.fillna(False)].sort_values("session_start").reset_index(drop=True)


def export_ndjson(df: pd.DataFrame, out_path: Path) -> None:
    """Export a DataFrame to line-delimited JSON (NDJSON) for quick inspection."""
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    df.to_json(out_path, orient="records", lines=True, date_format="iso")
