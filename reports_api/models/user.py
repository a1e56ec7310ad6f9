from typing import Optional
from pydantic import BaseModel, ConfigDict
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    name: Optional[str] = Field(default=None, max_length=255)
    email: str = Field(index=True, unique=True, max_length=255)
    picture: Optional[str] = Field(default=None, max_length=1024)


class UserResponse(BaseModel):
    id: int
    name: Optional[str] = None
    email: str
    picture: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
