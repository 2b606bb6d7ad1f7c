"""
FastAPI dependencies shared by the account routes.

  oauth2_scheme        — reads the caller's bearer token, if any
  get_upstream_client  — the lifespan-scoped client for the backend

The portal does not authenticate anyone itself. The token is read from the
"Authorization: Bearer <token>" header and handed, unchanged, to the
upstream client. A missing or invalid token is for the backend to reject,
so the scheme is declared with auto_error=False.
"""

from fastapi import Request
from fastapi.security import OAuth2PasswordBearer

from account_portal.config import settings
from account_portal.upstream import UpstreamClient


# tokenUrl points at the backend's login endpoint (used by Swagger UI's
# "Authorize" button).
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=settings.UPSTREAM_TOKEN_URL,
    auto_error=False,
)


def get_upstream_client(request: Request) -> UpstreamClient:
    """
    Return the UpstreamClient created in the application lifespan.

    Tests override this dependency to point the client at a mock transport.
    """
    return request.app.state.upstream
