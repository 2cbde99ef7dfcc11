from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class FileBlameRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    expected_line_count: int = Field(ge=0)


class RawAnnotationRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    revision_id: str
    commit_timestamp: datetime
    raw_author: str | None = None


class BlameLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    revision_id: str
    commit_timestamp: datetime
    author: str | None = None
