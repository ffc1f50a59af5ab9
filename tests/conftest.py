import sqlite3

import pytest
from fastapi.testclient import TestClient

from sqlsandbox import db
from sqlsandbox.main import app

_real_connect = sqlite3.connect


class RecordingConnection:
    """Wraps a real in-memory connection and remembers every statement it ran."""

    def __init__(self):
        self.conn = _real_connect(":memory:")
        self.statements = []
        self.closed = False

    def execute(self, sql):
        self.statements.append(sql)
        return self.conn.execute(sql)

    def close(self):
        self.closed = True
        self.conn.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def connections(monkeypatch):
    opened = []

    def fake_connect(*args, **kwargs):
        conn = RecordingConnection()
        opened.append(conn)
        return conn

    monkeypatch.setattr(db.sqlite3, "connect", fake_connect)
    return opened
