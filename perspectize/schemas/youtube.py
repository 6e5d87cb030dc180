"""YouTube ingestion Pydantic schemas"""

from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Any


class VideosRequest(BaseModel):
    """
    Batch of YouTube URLs to ingest.

    Accepts either {"video_urls": [...]} or a bare JSON array of URLs.
    """
    video_urls: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def accept_bare_list(cls, data: Any) -> Any:
        if isinstance(data, list):
            return {"video_urls": data}
        return data


class IngestResultResponse(BaseModel):
    """Outcome of ingesting one URL"""
    status: str
    url: str
    video_id: Optional[str] = None
    name: Optional[str] = None
    message: Optional[str] = None
    content_id: Optional[int] = None
