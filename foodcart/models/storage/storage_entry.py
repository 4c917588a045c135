from datetime import datetime, timezone
from typing import Optional
from sqlmodel import Column, Field, SQLModel, Text


class StorageEntry(SQLModel, table=True):
    __tablename__ = "tb_storage"

    key: str = Field(primary_key=True, max_length=128)
    value: str = Field(sa_column=Column(Text, nullable=False))

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None
