"""SQLite storage for player state snapshots."""
import json
import sqlite3
from datetime import datetime
from pathlib import Path

from loguru import logger

from math_quest.config import DEFAULT_DB_PATH
from math_quest.models import AggregateState
from math_quest.snapshot import state_from_dict, state_to_dict

SCHEMA_VERSION = 1

SCHEMA = """
CREATE TABLE IF NOT EXISTS player_state (
    player TEXT PRIMARY KEY,
    snapshot TEXT NOT NULL,
    schema_version INTEGER NOT NULL DEFAULT 1,
    saved_at TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


def save_state(db_path: str, state: AggregateState, player: str = "default") -> None:
    snapshot = json.dumps(state_to_dict(state), ensure_ascii=False)
    conn = get_connection(db_path)
    conn.execute(
        """INSERT INTO player_state (player, snapshot, schema_version, saved_at) VALUES (?, ?, ?, ?)
        ON CONFLICT(player) DO UPDATE SET snapshot=excluded.snapshot,
            schema_version=excluded.schema_version, saved_at=excluded.saved_at""",
        (player, snapshot, SCHEMA_VERSION, datetime.now().isoformat()),
    )
    conn.commit()
    conn.close()


def load_state(db_path: str, player: str = "default") -> AggregateState:
    """Load a player's state, or a fresh one if nothing is saved yet."""
    conn = get_connection(db_path)
    row = conn.execute(
        "SELECT snapshot, schema_version FROM player_state WHERE player = ?", (player,)
    ).fetchone()
    conn.close()
    if row is None:
        return AggregateState()
    if row["schema_version"] != SCHEMA_VERSION:
        logger.info("Migrating {} snapshot from schema {}", player, row["schema_version"])
    return state_from_dict(json.loads(row["snapshot"]))


def reset_state(db_path: str, player: str = "default") -> None:
    conn = get_connection(db_path)
    conn.execute("DELETE FROM player_state WHERE player = ?", (player,))
    conn.commit()
    conn.close()
