from enum import Enum
from typing import Optional

from pydantic import BaseModel


class SafeSearch(str, Enum):
    strict = "strict"
    moderate = "moderate"
    none = "none"


class MediaContent(BaseModel):
    url: Optional[str] = None
    mime_type: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None


class RemoteEntry(BaseModel):
    token: str                              # e.g. "tag:youtube.com,2008:video:<videoId>"
    title: str = ""
    video_id: Optional[str] = None
    keywords: Optional[str] = None
    description: Optional[str] = None
    media: Optional[MediaContent] = None    # None when no playable media is attached

    @property
    def restricted(self) -> bool:
        return self.media is None
