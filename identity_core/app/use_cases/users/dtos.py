from typing import Optional

from pydantic import BaseModel


class ChangePasswordCommand(BaseModel):
    current_password: str
    new_password: str
    new_password_confirmation: Optional[str] = None


class UpdateProfileCommand(BaseModel):
    """Partial profile update; only fields that were set are applied"""

    name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
