import logging

from fastapi import Header, Query

from app.config import settings
from app.errors import AuthenticationRequired, InvalidToken
from app.services.auth_service import verify_token

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

# Largest OFFSET a 64-bit SQL integer can hold.
MAX_OFFSET = 2**63 - 1


def _positive_int(raw: str | None, default: int) -> int:
    """Parse *raw* as a positive integer, falling back to *default*."""
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= 1 else default


class PaginationParams:
    """
    Reusable FastAPI dependency that resolves pagination query parameters.

    Usage in a router::

        @router.get("/articles")
        async def list_articles(pagination: PaginationParams = Depends()):
            ...

    Both parameters are read as raw strings so that a missing, non-numeric
    or non-positive value falls back to its default instead of failing
    validation.

    Attributes
    ----------
    page:
        1-based page number, default 1.  Clamped so the resulting OFFSET
        fits a 64-bit integer; a page past the end is simply empty.
    limit:
        Number of items per page, default ``settings.DEFAULT_PAGE_SIZE`` and
        clamped to ``settings.MAX_PAGE_SIZE``.
    offset:
        Computed SQL OFFSET derived from *page* and *limit*.
    """

    def __init__(
        self,
        page: str | None = Query(
            None,
            description="Page number (1-based). Defaults to 1.",
        ),
        limit: str | None = Query(
            None,
            description=(
                f"Items per page. Defaults to {settings.DEFAULT_PAGE_SIZE}, "
                f"max {settings.MAX_PAGE_SIZE}."
            ),
        ),
    ) -> None:
        self.limit = min(
            _positive_int(limit, settings.DEFAULT_PAGE_SIZE),
            settings.MAX_PAGE_SIZE,
        )
        self.page = min(_positive_int(page, 1), MAX_OFFSET // self.limit + 1)

    @property
    def offset(self) -> int:
        """SQL OFFSET value computed from the current page and limit."""
        return (self.page - 1) * self.limit


def get_current_user_id(
    authorization: str | None = Header(
        None,
        description="Bearer credential: `Bearer <token>`.",
    ),
) -> int:
    """
    Resolve the caller identity from the ``Authorization`` header.

    A missing or malformed header is 401, a token that fails verification
    is 403.  The returned id is passed explicitly to every service call
    that needs to know who is writing.
    """
    if not authorization:
        logger.debug("Auth failed: no Authorization header")
        raise AuthenticationRequired("Access token required")

    if not authorization.startswith(BEARER_PREFIX):
        logger.debug("Auth failed: Authorization header is not a bearer credential")
        raise AuthenticationRequired("Token must be in format: Bearer <token>")

    user_id = verify_token(authorization[len(BEARER_PREFIX):].strip())
    if user_id is None:
        logger.debug("Auth failed: invalid or expired token")
        raise InvalidToken("Invalid or expired token")
    return user_id
