from typing import Iterable
from fastapi import Depends, HTTPException, status

from app.core.security import get_current_user


def require_roles(user: dict, allowed: Iterable[str]) -> None:
    role = str(user.get("role", ""))
    if role not in set(allowed):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


async def get_current_admin(current_user=Depends(get_current_user)):
    # Viewers may only read reports; every other management route goes through here
    require_roles(current_user, {"admin"})
    return current_user
