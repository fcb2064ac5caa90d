from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from sentinel.core import security
from sentinel.modules.monitor.service import MonitoringService

reusable_bearer = HTTPBearer(auto_error=False)


async def get_current_operator(
    credentials: HTTPAuthorizationCredentials | None = Depends(reusable_bearer),
) -> str:
    """Return the operator id carried by a valid bearer token."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    claims = security.decode_access_token(credentials.credentials)
    if not claims or not claims.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Could not validate credentials",
        )
    if claims.get("scope") != security.OPERATOR_SCOPE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions",
        )
    return str(claims["sub"])


def get_monitor(request: Request) -> MonitoringService:
    return request.app.state.monitor
