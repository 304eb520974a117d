"""GitHub router - public profile analytics for a candidate's GitHub account."""

import logging

import httpx
from fastapi import APIRouter, HTTPException

from app.models.schemas import GithubReportRequest, GithubReportResponse
from app.services.github import GithubError, fetch_github_report

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["github"])


@router.post("/github", response_model=GithubReportResponse)
async def github_report(body: GithubReportRequest) -> GithubReportResponse:
    """Aggregate profile, top repositories and recent activity for a GitHub user."""
    try:
        report = await fetch_github_report(body.username, body.repo_limit)
    except GithubError as exc:
        logger.error(
            "GitHub request for '%s' failed (%d): %s",
            body.username,
            exc.status_code,
            exc.message,
        )
        status_code = 404 if exc.status_code == 404 else 502
        raise HTTPException(status_code=status_code, detail=exc.message)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except httpx.HTTPError:
        logger.exception("GitHub request for '%s' failed", body.username)
        raise HTTPException(status_code=502, detail="GitHub service unavailable")

    return GithubReportResponse(data=report)
