from fastapi import APIRouter, Depends
from app.models.user import User
from app.schemas.user_schemas import UserResponse
from app.utils.token import get_current_user

router = APIRouter()


# -------- USER PROFILE --------

@router.get("/me", response_model=UserResponse)
def get_my_profile(current_user: User = Depends(get_current_user)):
    return current_user
