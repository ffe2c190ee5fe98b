"""
Custom criteria JSON API (premium only).
"""
from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from promptstudio.database import get_db
from promptstudio.models import User
from promptstudio.routers.auth import require_auth
from promptstudio.services import custom_criteria as criteria_service
from promptstudio.services.subscription import get_subscription_info
from promptstudio.utils.constants import ERROR_MESSAGES

router = APIRouter(prefix="/custom-criteria", tags=["custom-criteria"])


async def require_premium(user: User = Depends(require_auth)) -> User:
    if not get_subscription_info(user).is_premium:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=ERROR_MESSAGES["criteria"]["premium_only"]
        )
    return user


def _to_json(criteria) -> dict:
    return {
        "id": criteria.id,
        "name": criteria.criteria_name,
        "createdAt": criteria.created_at.isoformat(),
    }


@router.get("")
async def list_custom_criteria(
    user: User = Depends(require_premium),
    db: AsyncSession = Depends(get_db),
):
    criteria = await criteria_service.list_criteria(db, user.id)
    return {"criteria": [_to_json(c) for c in criteria]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_custom_criteria(
    name: str = Body("", embed=True),
    user: User = Depends(require_premium),
    db: AsyncSession = Depends(get_db),
):
    try:
        criteria = await criteria_service.add_criteria(db, user.id, name)
    except criteria_service.CriteriaError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return _to_json(criteria)


@router.delete("/{criteria_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_custom_criteria(
    criteria_id: int,
    user: User = Depends(require_premium),
    db: AsyncSession = Depends(get_db),
):
    if not await criteria_service.delete_criteria(db, user.id, criteria_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=ERROR_MESSAGES["criteria"]["not_found"]
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
