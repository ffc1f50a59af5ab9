import json
import sqlite3

import pytest
from fastapi.testclient import TestClient

from sqlsandbox import db, main
from sqlsandbox.errors import UpstreamError
from sqlsandbox.examples import EXAMPLE_OUTPUT


@pytest.fixture
def llm(monkeypatch):
    """Replaces the upstream call; tests set .reply (text or exception)."""

    class FakeLLM:
        reply = "```json\n" + json.dumps(EXAMPLE_OUTPUT) + "\n```"
        prompts = []

        async def __call__(self, prompt):
            self.prompts.append(prompt)
            if isinstance(self.reply, Exception):
                raise self.reply
            return self.reply

    fake = FakeLLM()
    fake.prompts = []
    monkeypatch.setattr(main, "generate_text", fake)
    return fake


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_generate_returns_artifacts(client, llm):
    resp = client.post("/api/generate-sql", json={"prompt": "list students older than 20"})
    assert resp.status_code == 200
    assert resp.json() == EXAMPLE_OUTPUT
    assert '"list students older than 20"' in llm.prompts[0]


@pytest.mark.parametrize("body", [{}, {"prompt": ""}, {"prompt": "   "}, {"prompt": None}])
def test_generate_requires_prompt(client, llm, body):
    resp = client.post("/api/generate-sql", json=body)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Prompt is required."}
    assert llm.prompts == []


def test_generate_rejects_missing_body(client, llm):
    resp = client.post("/api/generate-sql")
    assert resp.status_code == 400
    assert "error" in resp.json()
    assert llm.prompts == []


def test_generate_upstream_failure(client, llm):
    llm.reply = UpstreamError("Failed to generate SQL. Please try again.")
    resp = client.post("/api/generate-sql", json={"prompt": "x"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to generate SQL. Please try again."}


def test_generate_unparsable_reply(client, llm):
    llm.reply = "I cannot help with that."
    resp = client.post("/api/generate-sql", json={"prompt": "x"})
    assert resp.status_code == 500
    assert "not be valid JSON" in resp.json()["error"]


def test_generate_passes_missing_keys_as_null(client, llm):
    llm.reply = '{"query": "SELECT 1"}'
    resp = client.post("/api/generate-sql", json={"prompt": "x"})
    assert resp.json() == {"query": "SELECT 1", "tableDefinition": None, "seedStatements": None}


def test_end_to_end_students(client, llm):
    artifacts = client.post("/api/generate-sql", json={"prompt": "list students older than 20"}).json()
    resp = client.post("/api/execute-sql", json=artifacts)
    assert resp.status_code == 200
    rows = resp.json()["rows"]
    assert [list(r) for r in rows] == [["name", "age"]] * 4
    assert all(r["age"] > 20 for r in rows)


def test_execute_single_row(client):
    resp = client.post("/api/execute-sql", json={
        "query": "SELECT * FROM t",
        "tableDefinition": "CREATE TABLE t (id INTEGER)",
        "seedStatements": ["INSERT INTO t VALUES (1)"],
    })
    assert resp.status_code == 200
    assert resp.json() == {"rows": [{"id": 1}]}


def test_execute_is_repeatable(client):
    body = {
        "query": EXAMPLE_OUTPUT["query"],
        "tableDefinition": EXAMPLE_OUTPUT["tableDefinition"],
        "seedStatements": EXAMPLE_OUTPUT["seedStatements"],
    }
    first = client.post("/api/execute-sql", json=body).json()
    second = client.post("/api/execute-sql", json=body).json()
    assert first == second


@pytest.mark.parametrize("body", [
    {"tableDefinition": "CREATE TABLE t (id INTEGER)", "seedStatements": []},
    {"query": "SELECT 1", "seedStatements": []},
    {"query": "SELECT 1", "tableDefinition": "CREATE TABLE t (id INTEGER)"},
    {"query": "", "tableDefinition": "CREATE TABLE t (id INTEGER)", "seedStatements": []},
    {"query": "   ", "tableDefinition": "CREATE TABLE t (id INTEGER)", "seedStatements": []},
    {"query": "SELECT 1", "tableDefinition": "\n\t", "seedStatements": []},
    {"query": "SELECT 1", "tableDefinition": "CREATE TABLE t (id INTEGER)", "seedStatements": None},
    {"query": "SELECT 1", "tableDefinition": "CREATE TABLE t (id INTEGER)", "seedStatements": "INSERT"},
])
def test_execute_rejects_incomplete_request(client, connections, body):
    resp = client.post("/api/execute-sql", json=body)
    assert resp.status_code == 400
    assert "error" in resp.json()
    assert connections == []


def test_execute_accepts_empty_seed_list(client):
    resp = client.post("/api/execute-sql", json={
        "query": "SELECT COUNT(*) AS n FROM t",
        "tableDefinition": "CREATE TABLE t (id INTEGER)",
        "seedStatements": [],
    })
    assert resp.json() == {"rows": [{"n": 0}]}


def test_execute_schema_error(client, connections):
    resp = client.post("/api/execute-sql", json={
        "query": "SELECT * FROM t",
        "tableDefinition": "CREATE TABLE (",
        "seedStatements": ["INSERT INTO t VALUES (1)"],
    })
    assert resp.status_code == 500
    assert resp.json()["error"].startswith("Failed to create table:")
    assert connections[0].statements == ["CREATE TABLE ("]
    assert connections[0].closed


def test_execute_seed_error(client, connections):
    resp = client.post("/api/execute-sql", json={
        "query": "SELECT * FROM t",
        "tableDefinition": "CREATE TABLE t (id INTEGER)",
        "seedStatements": ["INSERT INTO nowhere VALUES (1)", "INSERT INTO t VALUES (2)"],
    })
    assert resp.status_code == 500
    assert "statement 1" in resp.json()["error"]
    assert "no such table" in resp.json()["error"]
    assert connections[0].statements == ["CREATE TABLE t (id INTEGER)", "INSERT INTO nowhere VALUES (1)"]


def test_execute_query_error(client):
    resp = client.post("/api/execute-sql", json={
        "query": "SELECT FROM",
        "tableDefinition": "CREATE TABLE t (id INTEGER)",
        "seedStatements": [],
    })
    assert resp.status_code == 500
    assert resp.json()["error"].startswith("Failed to execute query:")


def test_allowed_origin_gets_cors_headers(client):
    origin = main.settings.allowed_origins[0]
    resp = client.get("/health", headers={"Origin": origin})
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == origin


def test_allowed_origin_preflight(client):
    origin = main.settings.allowed_origins[0]
    resp = client.options("/api/execute-sql", headers={
        "Origin": origin,
        "Access-Control-Request-Method": "POST",
        "Access-Control-Request-Headers": "content-type",
    })
    assert resp.status_code == 200


def test_unknown_origin_is_rejected(client, llm):
    resp = client.post(
        "/api/generate-sql",
        json={"prompt": "x"},
        headers={"Origin": "https://evil.example"},
    )
    assert resp.status_code == 403
    assert resp.json() == {"error": "Not allowed by CORS"}
    assert llm.prompts == []


def test_execute_returns_blobs_as_json(client):
    resp = client.post("/api/execute-sql", json={
        "query": "SELECT x'ff' AS b",
        "tableDefinition": "CREATE TABLE t (id INTEGER)",
        "seedStatements": [],
    })
    assert resp.status_code == 200
    assert resp.json() == {"rows": [{"b": [255]}]}


def test_execute_database_open_failure(client, monkeypatch):
    def broken_connect(*args, **kwargs):
        raise sqlite3.OperationalError("unable to open database")

    monkeypatch.setattr(db.sqlite3, "connect", broken_connect)
    resp = client.post("/api/execute-sql", json={
        "query": "SELECT * FROM t",
        "tableDefinition": "CREATE TABLE t (id INTEGER)",
        "seedStatements": [],
    })
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to initialize database."}


def test_unexpected_error_still_returns_json(llm):
    llm.reply = RuntimeError("boom")
    client = TestClient(main.app, raise_server_exceptions=False)
    resp = client.post("/api/generate-sql", json={"prompt": "x"})
    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("application/json")
    assert resp.json() == {"error": "An unexpected error occurred."}
