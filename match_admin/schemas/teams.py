"""Team reference table (read-only from this service)."""

import uuid
from typing import Optional

from sqlmodel import Field, SQLModel


class Team(SQLModel, table=True):  # type: ignore[call-arg]
    """A club or national team taking part in a fixture."""

    __tablename__ = "teams"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(index=True)
    country: str
    logo_url: Optional[str] = Field(default=None)
