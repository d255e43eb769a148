from typing import Optional
from fastapi import Request
from fastapi.security.utils import get_authorization_scheme_param

TOKEN_COOKIE = "token"


async def get_backend_token(request: Request) -> Optional[str]:
    """Bearer token to act with upstream.

    Sessions are issued by the backend itself; the dashboard only relays the
    token it receives, from the Authorization header or the `token` cookie.
    """
    scheme, param = get_authorization_scheme_param(request.headers.get("Authorization"))
    if scheme.lower() == "bearer" and param:
        return param
    return request.cookies.get(TOKEN_COOKIE) or None
