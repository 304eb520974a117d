"""Resume parse router - accepts an uploaded resume and returns extracted candidate info."""

import logging

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from app.config import settings
from app.models.schemas import ParseResponse
from app.services.extractor import parse_resume_text
from app.services.parser import extract_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["parse"])


@router.post("/parse", response_model=ParseResponse)
async def parse_resume(resume: UploadFile = File(...)) -> ParseResponse:
    """Parse an uploaded resume (PDF or plain text).

    Extracts the document text, then runs the heuristic extractor over it to
    derive name, headline, contacts, GitHub link, skills and highlights.
    """
    filename = resume.filename or "unknown"
    content = await resume.read(settings.max_upload_bytes + 1)

    if len(content) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="Resume file is too large.")

    try:
        text = await run_in_threadpool(extract_text, content, filename, resume.content_type)
    except ValueError as exc:
        logger.warning("Rejected resume '%s': %s", filename, exc)
        raise HTTPException(status_code=400, detail=str(exc))

    if not text.strip():
        raise HTTPException(
            status_code=400,
            detail="We could not read any text from the provided resume.",
        )

    parsed = await run_in_threadpool(parse_resume_text, text)
    logger.info(
        "Parsed resume '%s' for '%s' (%d skills, github=%s)",
        filename,
        parsed.name,
        len(parsed.skills),
        parsed.profile_username,
    )
    return ParseResponse(data=parsed)
