"""Profile and settings API endpoints."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_account, get_current_user, get_db
from app.models.account import Account
from app.models.user import User
from app.schemas.profile import (
    PreferencesResponse,
    PreferencesUpdate,
    ProfileCreate,
    ProfileResponse,
    ProfileUpdate,
)
from app.services.profiles import (
    NEUROTYPE_OPTIONS,
    load_preferences,
    provision_profile,
    update_preferences,
    update_profile,
)

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileResponse)
def get_profile(current_user: User = Depends(get_current_user)):
    """Get the signed-in user's profile (404 until provisioned)."""
    return current_user


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
def create_profile(
    profile_data: ProfileCreate,
    db: Session = Depends(get_db),
    current_account: Account = Depends(get_current_account),
):
    """Provision the profile for this account. Returns the existing one if already there."""
    return provision_profile(
        db,
        current_account.id,
        name=profile_data.name,
        nickname=profile_data.nickname,
        neurotype_tags=profile_data.neurotype_tags,
    )


@router.patch("", response_model=ProfileResponse)
def patch_profile(
    profile_data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update name, nickname or neurotype tags."""
    return update_profile(db, current_user, profile_data.model_dump(exclude_unset=True))


@router.get("/neurotypes", response_model=list[str])
def get_neurotype_options():
    """Suggested neurotype tags (no auth required)."""
    return NEUROTYPE_OPTIONS


@router.get("/preferences", response_model=PreferencesResponse)
def get_preferences(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get UI and accessibility preferences."""
    return load_preferences(db, current_user)


@router.patch("/preferences", response_model=PreferencesResponse)
def patch_preferences(
    preferences_data: PreferencesUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update UI and accessibility preferences."""
    return update_preferences(db, current_user, preferences_data.model_dump(exclude_unset=True))
