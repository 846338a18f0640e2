# Author: Bradley R. Kinnard — gatekeepers

"""FastAPI dependencies. Request tracking for now."""

from fastapi import Request


def get_request_id(request: Request) -> str:
    """set by the middleware in main.py, 'unknown' if something skipped it"""
    return getattr(request.state, "request_id", "unknown")
