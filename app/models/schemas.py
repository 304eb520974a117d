import re

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

GITHUB_LOGIN_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9-]{0,38}")


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys for the frontend."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ParsedResume(CamelModel):
    """Structured candidate information extracted from resume text."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    headline: str | None = None
    profile_url: str | None = None
    profile_username: str | None = None
    emails: list[str] = Field(default_factory=list)
    phones: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    summary: list[str] = Field(default_factory=list)
    raw_text: str = ""


class ParseResponse(BaseModel):
    """API response returned by POST /api/parse."""

    data: ParsedResume


class GithubReportRequest(CamelModel):
    """Request body for the POST /api/github endpoint."""

    username: str
    repo_limit: int | None = None

    @field_validator("username")
    @classmethod
    def username_must_be_a_github_login(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("GitHub username cannot be empty.")
        if not GITHUB_LOGIN_RE.fullmatch(v):
            raise ValueError("GitHub username may only contain letters, digits and hyphens.")
        return v


class LanguageCount(CamelModel):
    language: str
    count: int


class RepositorySummary(CamelModel):
    """A repository selected for the report, with its README excerpt."""

    name: str
    html_url: str
    description: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    open_issues_count: int = 0
    language: str | None = None
    topics: list[str] = Field(default_factory=list)
    homepage: str | None = None
    updated_at: str | None = None
    readme_excerpt: str | None = None


class RepositoryAggregates(CamelModel):
    total_stars: int = 0
    total_forks: int = 0
    total_open_issues: int = 0
    repos_with_live_demo: int = 0
    repository_count: int = 0
    average_stars: float = 0.0


class ActivityItem(CamelModel):
    """One public GitHub event reduced to a human-readable line."""

    id: str
    type: str
    repo_name: str
    created_at: str
    description: str
    url: str | None = None


class GithubReport(CamelModel):
    """Aggregated public GitHub profile data for a candidate."""

    login: str
    name: str | None = None
    avatar_url: str | None = None
    html_url: str | None = None
    bio: str | None = None
    followers: int = 0
    following: int = 0
    public_repos: int = 0
    public_gists: int = 0
    created_at: str | None = None
    top_languages: list[LanguageCount] = Field(default_factory=list)
    repos: list[RepositorySummary] = Field(default_factory=list)
    aggregates: RepositoryAggregates = Field(default_factory=RepositoryAggregates)
    spotlight: RepositorySummary | None = None
    recent_activity: list[ActivityItem] = Field(default_factory=list)


class GithubReportResponse(BaseModel):
    """API response returned by POST /api/github."""

    data: GithubReport
