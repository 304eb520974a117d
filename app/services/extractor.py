"""Candidate info extraction from resume text.

Derives name, headline, contact details, a GitHub profile link, a skills list
and a short highlights summary using heuristics and regex patterns. Every
function here is pure: no I/O, no shared state.
"""

import logging
import re
import string

from app.models.schemas import ParsedResume

logger = logging.getLogger(__name__)

PROFILE_DOMAIN = "github.com"

_EMAIL_PATTERN = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE | re.ASCII)
_PHONE_PATTERN = re.compile(
    r"(?:\+?\d{1,3}[\s-]?)?(?:\(?\d{3}\)?[\s-]?)?\d{3}[\s-]?\d{4}", re.ASCII
)
_PROFILE_URL_PATTERN = re.compile(
    rf"https?://(?:www\.)?{re.escape(PROFILE_DOMAIN)}/[^\s)]+", re.IGNORECASE
)
_PROFILE_PATH_PATTERN = re.compile(
    rf"^{re.escape(PROFILE_DOMAIN)}/([^/\s]+)", re.IGNORECASE
)
_URL_TRAILING_JUNK = ",.;)" + string.whitespace

SKILLS_HEADERS = ("skills", "technical skills", "toolbox", "technologies")
SKILLS_STOP_SECTIONS = ("experience", "projects", "education")
MAX_SKILLS = 15

_SKILLS_SECTION_PATTERN = re.compile(
    rf"({'|'.join(SKILLS_HEADERS)})\s*:?\s?([\s\S]+?)(?:\n\n|{'|'.join(SKILLS_STOP_SECTIONS)})",
    re.IGNORECASE,
)
# Anchored at the start: matches up to the end of the last section terminator
_LAST_TERMINATOR = re.compile(
    rf"[\s\S]*(?:\n\n|{'|'.join(SKILLS_STOP_SECTIONS)})",
    re.IGNORECASE,
)
_SKILL_SEPARATORS = re.compile(r"[,•\n]")

# Action/impact words that mark a sentence as a likely highlight
SUMMARY_KEYWORDS = (
    "experience",
    "developed",
    "engineer",
    "project",
    "designed",
    "built",
    "led",
    "collaborated",
    "improved",
    "delivered",
    "managed",
    "optimized",
    "implemented",
    "created",
    "modernized",
    "launched",
)
MAX_SENTENCE_LENGTH = 300
MAX_SUMMARY_SENTENCES = 4

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")
_BULLET_GLYPH = re.compile(r"[•*-]")
_DIGITS = re.compile(r"\d+", re.ASCII)

MAX_NAME_LENGTH = 60
MAX_NAME_WORDS = 5
MAX_HEADLINE_LENGTH = 80


def normalize_text(text: str) -> str:
    """Canonicalize line endings and collapse runs of blank lines.

    CR-LF and lone CR become LF, three or more consecutive newlines become
    exactly two, and the result is trimmed. Idempotent.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def extract_name(lines: list[str]) -> str | None:
    """Return the first short, digit-free header line as the candidate name.

    Resume headers conventionally open with the candidate's name on its own
    line, so the first line that is non-empty, at most 60 characters, free of
    digits, not a "curriculum vitae" banner and at most five words long wins.
    """
    for line in lines:
        stripped = line.strip()
        if not stripped:
            continue
        if len(stripped) > MAX_NAME_LENGTH:
            continue
        if _DIGITS.search(stripped):
            continue
        if "curriculum vitae" in stripped.lower():
            continue
        if len(stripped.split()) <= MAX_NAME_WORDS:
            return stripped
    return None


def extract_headline(lines: list[str], name: str | None) -> str | None:
    """Return the line right below the name line, if it is short enough."""
    if not name:
        return None

    target = name.lower()
    for index, line in enumerate(lines):
        if line.strip().lower() != target:
            continue
        if index + 1 >= len(lines):
            return None
        next_line = lines[index + 1].strip()
        if next_line and len(next_line) <= MAX_HEADLINE_LENGTH:
            return next_line
        return None
    return None


def extract_emails(text: str) -> list[str]:
    """Return distinct lower-cased email addresses in first-seen order."""
    emails = (match.group(0).lower() for match in _EMAIL_PATTERN.finditer(text))
    return list(dict.fromkeys(emails))


def extract_phones(text: str) -> list[str]:
    """Return distinct phone numbers carrying at least 10 digits.

    Internal whitespace runs are collapsed to a single space. Shorter matches
    (bare 7-digit numbers, years next to each other, etc.) are dropped.
    """
    phones: list[str] = []
    for match in _PHONE_PATTERN.finditer(text):
        candidate = re.sub(r"\s+", " ", match.group(0)).strip()
        digit_count = sum(c.isdigit() for c in candidate)
        if digit_count >= 10 and candidate not in phones:
            phones.append(candidate)
    return phones


def extract_profile_link(text: str) -> tuple[str | None, str | None]:
    """Find the first GitHub link and derive the account username from it.

    Returns:
        Tuple of (profile URL, username). When a username can be read from
        the path the URL is rebuilt as ``https://github.com/<username>``;
        otherwise the stripped raw match is returned with a ``None`` username.
        Both are ``None`` when the text holds no GitHub link.
    """
    match = _PROFILE_URL_PATTERN.search(text)
    if match is None:
        return None, None

    raw_url = match.group(0).rstrip(_URL_TRAILING_JUNK)
    bare = re.sub(r"^https?://", "", raw_url, flags=re.IGNORECASE)
    bare = re.sub(r"^www\.", "", bare, flags=re.IGNORECASE)

    path_match = _PROFILE_PATH_PATTERN.match(bare)
    if path_match is None:
        return raw_url, None

    username = path_match.group(1)
    return f"https://{PROFILE_DOMAIN}/{username}", username


def extract_skills(text: str) -> list[str]:
    """Split the labelled skills section into individual skill tokens.

    The section runs from a recognised header up to the first blank line or
    the first stop keyword, whichever comes first, even mid-line. Source
    duplicates are kept; at most 15 tokens are returned.
    """
    # Sections end on a terminator; nothing past the last one can match.
    last = _LAST_TERMINATOR.match(text)
    if last is None:
        return []

    match = _SKILLS_SECTION_PATTERN.search(text, 0, last.end())
    if match is None:
        return []

    tokens = (token.strip() for token in _SKILL_SEPARATORS.split(match.group(2)))
    return [token for token in tokens if len(token) > 1][:MAX_SKILLS]


def tokenize_sentences(text: str) -> list[str]:
    """Split text into unique sentences on terminal punctuation.

    Newlines are flattened first. Sentences longer than 300 characters are
    discarded (tables and other run-on blocks).
    """
    flattened = re.sub(r"\n+", " ", text)
    sentences = (s.strip() for s in _SENTENCE_BOUNDARY.split(flattened))
    kept = (s for s in sentences if 0 < len(s) <= MAX_SENTENCE_LENGTH)
    return list(dict.fromkeys(kept))


def score_sentence(sentence: str) -> float:
    """Heuristic relevance score for a candidate highlight sentence."""
    lower = sentence.lower()
    score = 0.0
    for keyword in SUMMARY_KEYWORDS:
        if keyword in lower:
            score += 2
    score += min(len(sentence) / 10, 10)
    if _BULLET_GLYPH.search(sentence):
        score += 1
    if "%" in sentence or _DIGITS.search(sentence):
        score += 1
    return score


def build_summary(sentences: list[str]) -> list[str]:
    """Pick the top four sentences by score, ties kept in document order."""
    if not sentences:
        return []

    ranked = sorted(sentences, key=score_sentence, reverse=True)
    return ranked[:MAX_SUMMARY_SENTENCES]


def parse_resume_text(text: str) -> ParsedResume:
    """Extract structured candidate information from resume text.

    Args:
        text: Decoded resume text, in any line-ending convention.

    Returns:
        A ParsedResume; fields the text does not support are ``None`` or empty.
    """
    cleaned = normalize_text(text)
    lines = cleaned.split("\n")

    name = extract_name(lines)
    headline = extract_headline(lines, name)

    emails = extract_emails(cleaned)
    phones = extract_phones(cleaned)
    profile_url, profile_username = extract_profile_link(cleaned)

    skills = extract_skills(cleaned)
    summary = build_summary(tokenize_sentences(cleaned))

    logger.debug(
        "Parsed resume (name=%s, emails=%d, phones=%d, skills=%d, summary=%d)",
        name,
        len(emails),
        len(phones),
        len(skills),
        len(summary),
    )

    return ParsedResume(
        name=name,
        headline=headline,
        profile_url=profile_url,
        profile_username=profile_username,
        emails=emails,
        phones=phones,
        skills=skills,
        summary=summary,
        raw_text=cleaned,
    )
