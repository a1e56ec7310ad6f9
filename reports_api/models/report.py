from typing import Optional
from sqlalchemy import Text
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


class Report(SQLModel, table=True):
    __tablename__ = "reports"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)

    # Reporter info
    user_id: int = Field(index=True)

    # Report fields
    title: str = Field(max_length=255)
    description: str = Field(sa_type=Text)
    location: str = Field(max_length=255)
    contact: str = Field(max_length=255)
    status: str = Field(max_length=50)  # free text, no fixed vocabulary
    image: Optional[str] = Field(default=None, max_length=255)  # filename under the uploads dir
