import httpx
import pytest
from fastapi.testclient import TestClient

import app.routers.github as github_router
from app.config import settings
from app.main import app
from app.models.schemas import GithubReport
from app.services.github import GithubError


SAMPLE_RESUME = (
    "Jane Doe\n"
    "Senior Backend Engineer\n"
    "Contact: jane.doe@example.com, (415) 555-2671\n"
    "https://github.com/janedoe\n"
    "Skills: Go, Kubernetes, PostgreSQL\n"
    "Experience: Led migration of billing service, improved throughput by 40%."
)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_parse_plain_text_resume(client):
    response = client.post(
        "/api/parse",
        files={"resume": ("resume.txt", SAMPLE_RESUME.encode("utf-8"), "text/plain")},
    )
    assert response.status_code == 200

    data = response.json()["data"]
    assert data["name"] == "Jane Doe"
    assert data["headline"] == "Senior Backend Engineer"
    assert data["profileUsername"] == "janedoe"
    assert data["profileUrl"] == "https://github.com/janedoe"
    assert data["emails"] == ["jane.doe@example.com"]
    assert "Kubernetes" in data["skills"]
    assert data["rawText"] == SAMPLE_RESUME


def test_parse_rejects_docx(client):
    response = client.post(
        "/api/parse",
        files={"resume": ("resume.docx", b"PK\x03\x04", "application/octet-stream")},
    )
    assert response.status_code == 400
    assert "DOC and DOCX formats are not supported" in response.json()["detail"]


def test_parse_rejects_unknown_type(client):
    response = client.post(
        "/api/parse",
        files={"resume": ("photo.png", b"\x89PNG", "image/png")},
    )
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Unsupported file type")


def test_parse_rejects_blank_text(client):
    response = client.post(
        "/api/parse",
        files={"resume": ("resume.txt", b"   \n\n  ", "text/plain")},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "We could not read any text from the provided resume."


def test_parse_requires_resume_field(client):
    response = client.post("/api/parse", files={"other": ("a.txt", b"x", "text/plain")})
    assert response.status_code == 422


def test_github_report_endpoint(client, monkeypatch):
    calls = []

    async def fake_fetch(username, repo_limit=None):
        calls.append((username, repo_limit))
        return GithubReport(login=username, name="Jane Doe")

    monkeypatch.setattr(github_router, "fetch_github_report", fake_fetch)

    response = client.post("/api/github", json={"username": "  janedoe ", "repoLimit": 5})
    assert response.status_code == 200
    assert calls == [("janedoe", 5)]

    data = response.json()["data"]
    assert data["login"] == "janedoe"
    assert data["topLanguages"] == []
    assert data["aggregates"]["repositoryCount"] == 0


def test_github_report_rejects_blank_username(client):
    response = client.post("/api/github", json={"username": "   "})
    assert response.status_code == 422


def test_github_report_maps_not_found(client, monkeypatch):
    async def fake_fetch(username, repo_limit=None):
        raise GithubError("Not Found", 404)

    monkeypatch.setattr(github_router, "fetch_github_report", fake_fetch)

    response = client.post("/api/github", json={"username": "ghost"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Not Found"


def test_github_report_maps_upstream_failures(client, monkeypatch):
    async def rate_limited(username, repo_limit=None):
        raise GithubError("API rate limit exceeded", 403)

    monkeypatch.setattr(github_router, "fetch_github_report", rate_limited)
    response = client.post("/api/github", json={"username": "janedoe"})
    assert response.status_code == 502
    assert response.json()["detail"] == "API rate limit exceeded"

    async def unreachable(username, repo_limit=None):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(github_router, "fetch_github_report", unreachable)
    response = client.post("/api/github", json={"username": "janedoe"})
    assert response.status_code == 502
    assert response.json()["detail"] == "GitHub service unavailable"


@pytest.mark.parametrize("username", ["../user", "jane/doe", "-jane", "jane_doe", "a" * 40])
def test_github_report_rejects_non_login_usernames(client, monkeypatch, username):
    calls = []

    async def fake_fetch(username, repo_limit=None):
        calls.append(username)
        return GithubReport(login=username)

    monkeypatch.setattr(github_router, "fetch_github_report", fake_fetch)

    response = client.post("/api/github", json={"username": username})
    assert response.status_code == 422
    assert calls == []


def test_parse_rejects_oversized_upload(client, monkeypatch):
    monkeypatch.setattr(settings, "max_upload_bytes", 16)

    response = client.post(
        "/api/parse",
        files={"resume": ("resume.txt", b"x" * 17, "text/plain")},
    )
    assert response.status_code == 413

    response = client.post(
        "/api/parse",
        files={"resume": ("resume.txt", b"Jane Doe\nSRE", "text/plain")},
    )
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Jane Doe"
