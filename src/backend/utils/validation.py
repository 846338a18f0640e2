# Author: Bradley R. Kinnard — garbage in, 413 out

"""Input validation. Reject bad requests before they cost a parse."""

from fastapi import HTTPException, status

from src.backend.config import settings

SUPPORTED_LANGUAGES = {"python"}


def validate_code_size(code: str, filename: str | None = None) -> None:
    """Reject code over the size limit. No point walking a 10MB file."""
    size = len(code.encode("utf-8"))
    if size > settings.max_code_bytes:
        where = f" ({filename})" if filename else ""
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"code too large{where}: {size} bytes, max {settings.max_code_bytes}"
        )


def validate_language(language: str) -> None:
    """Python only, the analyzer walks Python's own AST. Case insensitive."""
    if language.lower() not in SUPPORTED_LANGUAGES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"unsupported language: {language}. try: {', '.join(sorted(SUPPORTED_LANGUAGES))}"
        )


def validate_batch_size(count: int) -> None:
    if count == 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="batch has no files"
        )
    if count > settings.max_batch_files:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"too many files: {count}, max {settings.max_batch_files}"
        )


def validate_analyze_request(code: str, language: str, filename: str | None = None) -> None:
    """Run all validations. Call this from route before doing real work."""
    validate_code_size(code, filename)
    validate_language(language)
