from fastapi import APIRouter, Depends

from tripsmith.schemas.user_schema import UserInfo
from tripsmith.core.security import get_current_user

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={404: {"description": "Not found"}},
)

@router.get("/me", response_model=UserInfo)
async def read_users_me(current_user: dict = Depends(get_current_user)):
    """
    Get the profile of the currently authenticated user.
    """
    # `current_user` is the decoded Firebase token payload.
    return UserInfo(
        uid=current_user['uid'],
        email=current_user.get('email'),
        full_name=current_user.get('name')
    )
