"""GitHub profile service - aggregates public profile, repository and activity data.

All requests go through a shared httpx.AsyncClient. README excerpts for the
selected repositories are fetched concurrently and are best-effort: a missing
or failing README never fails the report.
"""

import asyncio
import logging
import re
from collections import Counter
from typing import Any
from urllib.parse import quote

import httpx

from app.config import settings
from app.models.schemas import (
    GITHUB_LOGIN_RE,
    ActivityItem,
    GithubReport,
    LanguageCount,
    RepositoryAggregates,
    RepositorySummary,
)

logger = logging.getLogger(__name__)

MAX_TOP_LANGUAGES = 10

_client: httpx.AsyncClient | None = None


class GithubError(Exception):
    """Raised when the GitHub API answers with a non-success status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _get_client() -> httpx.AsyncClient:
    """Return the shared AsyncClient, creating it on first call."""
    global _client
    if _client is None:
        headers = {"User-Agent": settings.github_user_agent}
        if settings.github_token:
            headers["Authorization"] = f"Bearer {settings.github_token}"
        _client = httpx.AsyncClient(
            base_url=settings.github_api_base,
            headers=headers,
            timeout=settings.github_timeout,
        )
        logger.info("GitHub AsyncClient initialized (base_url=%s)", settings.github_api_base)
    return _client


async def close_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


async def _get_json(client: httpx.AsyncClient, endpoint: str) -> Any:
    response = await client.get(endpoint, headers={"Accept": "application/vnd.github+json"})
    if response.is_success:
        return response.json()

    try:
        body = response.json()
    except ValueError:
        body = {}
    message = body.get("message") if isinstance(body, dict) else None
    if not isinstance(message, str):
        message = f"GitHub request failed with status {response.status_code}"
    raise GithubError(message, response.status_code)


async def _fetch_readme_excerpt(client: httpx.AsyncClient, owner: str, repo: str) -> str | None:
    """Return the first characters of a repository README, or None."""
    try:
        response = await client.get(
            f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/readme",
            headers={"Accept": "application/vnd.github.raw"},
        )
    except httpx.HTTPError as exc:
        logger.warning("Failed to load README for %s/%s: %s", owner, repo, exc)
        return None

    if not response.is_success:
        return None
    return response.text[: settings.readme_excerpt_chars]


def resolve_repo_limit(repo_limit: int | None) -> int:
    """Clamp a requested repository count to the configured bounds."""
    if repo_limit is not None and repo_limit > 0:
        return min(repo_limit, settings.max_repo_limit)
    return settings.default_repo_limit


def _humanize_action(action: str) -> str:
    return action.replace("_", " ")


def summarize_event(event: dict[str, Any]) -> ActivityItem:
    """Reduce a raw public event to a one-line activity description."""
    event_type = event.get("type") or ""
    payload = event.get("payload") or {}
    description = ""
    url = None

    if event_type == "PushEvent":
        commits = payload.get("commits") or []
        messages = [c.get("message") for c in commits if c and c.get("message")][:2]
        if messages:
            plural = "s" if len(messages) > 1 else ""
            description = f"Pushed {len(messages)} commit{plural}: {' · '.join(messages)}"
        else:
            description = "Pushed new commits"
    elif event_type in ("PullRequestEvent", "IssuesEvent"):
        key, label = (
            ("pull_request", "pull request")
            if event_type == "PullRequestEvent"
            else ("issue", "issue")
        )
        action = _humanize_action(payload.get("action") or "updated")
        target = payload.get(key) or {}
        description = f"{action} {label} {target.get('title') or ''}".strip()
        url = target.get("html_url")
    elif event_type == "CreateEvent":
        ref_type = payload.get("ref_type") or "repository"
        ref = payload.get("ref")
        description = f"Created {ref_type} {ref}" if ref else f"Created {ref_type}"
    elif event_type == "ReleaseEvent":
        release = payload.get("release") or {}
        description = f"Published release {release.get('name') or ''}".strip()
        url = release.get("html_url")
    else:
        description = re.sub(r"([A-Z])", r" \1", event_type).strip()

    return ActivityItem(
        id=str(event.get("id", "")),
        type=event_type,
        repo_name=(event.get("repo") or {}).get("name") or "",
        created_at=event.get("created_at") or "",
        description=description,
        url=url,
    )


def summarize_languages(repos: list[dict[str, Any]]) -> list[LanguageCount]:
    counts = Counter(repo["language"] for repo in repos if repo.get("language"))
    return [
        LanguageCount(language=language, count=count)
        for language, count in counts.most_common(MAX_TOP_LANGUAGES)
    ]


def aggregate_repositories(repos: list[dict[str, Any]]) -> RepositoryAggregates:
    total_stars = sum(repo.get("stargazers_count") or 0 for repo in repos)
    return RepositoryAggregates(
        total_stars=total_stars,
        total_forks=sum(repo.get("forks_count") or 0 for repo in repos),
        total_open_issues=sum(repo.get("open_issues_count") or 0 for repo in repos),
        repos_with_live_demo=sum(1 for repo in repos if repo.get("homepage")),
        repository_count=len(repos),
        average_stars=round(total_stars / len(repos), 1) if repos else 0.0,
    )


async def fetch_github_report(
    username: str,
    repo_limit: int | None = None,
    client: httpx.AsyncClient | None = None,
) -> GithubReport:
    """Build the public GitHub report for a user.

    Args:
        username: GitHub login, e.g. the username derived from a resume link.
        repo_limit: How many top-starred repositories to include.
        client: HTTP client to use; defaults to the shared client.

    Returns:
        The aggregated GithubReport.

    Raises:
        ValueError: If *username* is not a valid GitHub login.
        GithubError: If a profile, repository or event request fails.
        httpx.HTTPError: On transport-level failures.
    """
    if not GITHUB_LOGIN_RE.fullmatch(username):
        raise ValueError(f"Invalid GitHub username: {username!r}")

    client = client or _get_client()
    login = quote(username, safe="")
    limit = resolve_repo_limit(repo_limit)

    profile = await _get_json(client, f"/users/{login}")
    repos = await _get_json(client, f"/users/{login}/repos?per_page=100&sort=updated")

    top_repos = sorted(repos, key=lambda r: r.get("stargazers_count") or 0, reverse=True)[:limit]
    excerpts = await asyncio.gather(
        *(_fetch_readme_excerpt(client, username, repo["name"]) for repo in top_repos)
    )
    selected = [
        RepositorySummary(
            name=repo["name"],
            html_url=repo.get("html_url") or "",
            description=repo.get("description"),
            stargazers_count=repo.get("stargazers_count") or 0,
            forks_count=repo.get("forks_count") or 0,
            open_issues_count=repo.get("open_issues_count") or 0,
            language=repo.get("language"),
            topics=repo.get("topics") or [],
            homepage=repo.get("homepage"),
            updated_at=repo.get("updated_at"),
            readme_excerpt=excerpt,
        )
        for repo, excerpt in zip(top_repos, excerpts)
    ]

    events = await _get_json(client, f"/users/{login}/events/public")
    activity = [summarize_event(event) for event in events]
    recent_activity = [item for item in activity if item.repo_name][: settings.max_activity_items]

    logger.info(
        "Built GitHub report for '%s' (%d repos, %d selected, %d activity items)",
        username,
        len(repos),
        len(selected),
        len(recent_activity),
    )

    return GithubReport(
        login=profile.get("login") or username,
        name=profile.get("name"),
        avatar_url=profile.get("avatar_url"),
        html_url=profile.get("html_url"),
        bio=profile.get("bio"),
        followers=profile.get("followers") or 0,
        following=profile.get("following") or 0,
        public_repos=profile.get("public_repos") or 0,
        public_gists=profile.get("public_gists") or 0,
        created_at=profile.get("created_at"),
        top_languages=summarize_languages(repos),
        repos=selected,
        aggregates=aggregate_repositories(repos),
        spotlight=selected[0] if selected else None,
        recent_activity=recent_activity,
    )
