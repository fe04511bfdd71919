import logging
from secrets import compare_digest

from fastapi import Request

from famcal.api.endpoints.auth_util import OptionalSession
from famcal.application.exceptions import CsrfMismatch, Unauthorized

CSRF_HEADER_NAME = "X-CSRF-Token"

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def verify_csrf_token(request: Request, authed: OptionalSession) -> None:
    """
    Router level dependency protecting every state changing request. The
    client must echo the CSRF token it was given at login in a header; since
    the session cookie is sent automatically by the browser but the token is
    not, a forged cross-site request cannot provide it.

    A missing or mismatched token is either a bug or an attacker trying to
    forge a request, which is why it gets logged.
    """

    if request.method.upper() in SAFE_METHODS:
        return

    if not authed:
        raise Unauthorized("Session is missing, invalid, or expired")

    token = request.headers.get(CSRF_HEADER_NAME, "")
    expected = authed.session.csrf_token

    if not token or not compare_digest(token.encode(), expected.encode()):
        logger = logging.getLogger("famcal")
        logger.warning(
            "CSRF token validation failure for user %s on `%s %s`",
            authed.user.id,
            request.method,
            request.url.path,
        )

        raise CsrfMismatch("CSRF token validation failure")
