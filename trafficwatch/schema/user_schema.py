from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from trafficwatch.utils.enum import Role


class UserSchema(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: Role
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UpdateRoleSchema(BaseModel):
    role: Optional[str] = None
