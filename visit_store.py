# Service visit storage (SQLite)
import sqlite3
from datetime import datetime

from chemistry import READING_FIELDS

FIELDS = list(READING_FIELDS.values())


def init_db(db_path):
    conn = sqlite3.connect(db_path)
    c = conn.cursor()
    c.execute('''CREATE TABLE IF NOT EXISTS visits (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT, client TEXT, pool_gallons REAL,
        ph REAL, fc REAL, ta REAL, cya REAL, salt REAL,
        notes TEXT
    )''')
    conn.commit()
    conn.close()


def _number(value):
    # REAL columns hand back 2500.0 for a stored 2500
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _row_to_visit(row):
    return {
        "id": row["id"],
        "date": row["date"],
        "client": row["client"],
        "pool_gallons": _number(row["pool_gallons"]),
        "readings": {f: _number(row[f]) for f in FIELDS},
        "notes": row["notes"],
    }


def save_visit(db_path, client, pool_gallons, readings, notes=None, date=None):
    """Insert one visit's reading set and return the new row id."""
    date = date or datetime.today().strftime("%Y-%m-%d")
    readings = readings or {}
    conn = sqlite3.connect(db_path)
    try:
        c = conn.cursor()
        c.execute('''INSERT INTO visits (
            date, client, pool_gallons, ph, fc, ta, cya, salt, notes
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)''',
        (date, client, pool_gallons) + tuple(readings.get(f) for f in FIELDS) + (notes,))
        conn.commit()
        return c.lastrowid
    finally:
        conn.close()


def list_visits(db_path, client=None, limit=50):
    """Return stored visits, newest first, optionally for one client."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    try:
        if client:
            rows = conn.execute(
                "SELECT * FROM visits WHERE client = ? ORDER BY date DESC, id DESC LIMIT ?",
                (client, limit)).fetchall()
        else:
            rows = conn.execute(
                "SELECT * FROM visits ORDER BY date DESC, id DESC LIMIT ?",
                (limit,)).fetchall()
    finally:
        conn.close()
    return [_row_to_visit(r) for r in rows]


def latest_visit(db_path, client):
    visits = list_visits(db_path, client=client, limit=1)
    return visits[0] if visits else None
