"""FastAPI integration: bearer token extraction and an authentication dependency.

Example:
    >>> signer = TokenSigner(b"secret")
    >>> auth = BearerAuth(signer)
    >>>
    >>> @app.get("/me")
    ... async def me(claims: Annotated[Claims, Depends(auth)]) -> dict:
    ...     return {"sub": claims.subject}

Use ``FastAPI(dependencies=[Depends(auth)])`` to protect every route.
"""

from __future__ import annotations

import inspect
from typing import Awaitable, Callable, Union

import structlog
from fastapi import HTTPException, Request, status

from lanyard.exceptions import AuthenticationError
from lanyard.models import Claims
from lanyard.signer import TokenSigner

log = structlog.get_logger()

BEARER_PREFIX = "Bearer "
ACCESS_TOKEN_PARAM = "access_token"
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")
STATE_ATTRIBUTE = "lanyard_claims"

TokenExtractor = Callable[[Request], Union[str, Awaitable[str]]]


async def extract_token(request: Request) -> str:
    """Extract a bearer token from the request.

    Looks at, in order: an ``Authorization: Bearer <token>`` header (scheme
    is case-insensitive), the ``access_token`` query parameter, and the
    ``access_token`` field of a form-encoded body.

    Returns:
        The token, or an empty string if the request carries none
    """
    auth = request.headers.get("Authorization", "")
    if auth[: len(BEARER_PREFIX)].lower() == BEARER_PREFIX.lower():
        return auth[len(BEARER_PREFIX) :].strip()

    token = request.query_params.get(ACCESS_TOKEN_PARAM)
    if token:
        return token

    if request.headers.get("Content-Type", "").startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        value = form.get(ACCESS_TOKEN_PARAM)
        if isinstance(value, str):
            return value
    return ""


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


class BearerAuth:
    """FastAPI dependency that verifies the request's bearer token.

    On success the verified claims are returned and cached on
    ``request.state`` for claims_from_request(). Every failure is a 401.

    Args:
        signer: The TokenSigner used to verify tokens.
        extractor: Callable returning the raw token for a request (sync or
            async). Defaults to extract_token.
        expose_detail: Put the root cause of a verification failure in the
            response body. Off by default so clients cannot tell which
            check failed; the cause is always logged.
    """

    def __init__(
        self,
        signer: TokenSigner,
        extractor: TokenExtractor = extract_token,
        expose_detail: bool = False,
    ):
        self.signer = signer
        self.extractor = extractor
        self.expose_detail = expose_detail

    async def __call__(self, request: Request) -> Claims:
        token = self.extractor(request)
        if inspect.isawaitable(token):
            token = await token
        if not token:
            raise _unauthorized("No token found")

        try:
            claims = self.signer.verify(token)
        except AuthenticationError as e:
            log.info("auth_rejected", path=request.url.path, detail=e.detail)
            raise _unauthorized(e.detail if self.expose_detail else e.message) from e

        setattr(request.state, STATE_ATTRIBUTE, claims)
        return claims


def claims_from_request(request: Request) -> Claims:
    """Return the claims BearerAuth verified for this request.

    Returns an empty Claims if the request was not authenticated.
    """
    claims = getattr(request.state, STATE_ATTRIBUTE, None)
    if claims is None:
        return Claims()
    return claims
