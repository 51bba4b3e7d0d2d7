"""
Request dependencies shared by the routes.

Identity is established by the authenticating gateway in front of this
service and forwarded in the X-User-ID header.
"""

from fastapi import Header, HTTPException


async def get_current_user_id(x_user_id: str = Header(..., alias="X-User-ID")) -> str:
    """Verified user ID forwarded by the gateway."""
    user_id = x_user_id.strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Missing user identity")
    return user_id
