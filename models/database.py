import os
import sqlite3

from config import Config


def get_connection():
    path = Config.DB_PATH
    conn = sqlite3.connect(path, uri=path.startswith("file:"))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def init_db():
    schema_path = os.path.join(os.path.dirname(__file__), "schema.sql")
    with open(schema_path) as f:
        schema = f.read()
    conn = get_connection()
    conn.executescript(schema)
    conn.close()
