from typing import Callable, Dict, Optional

from videofeed.domain.entities.remote_entry import RemoteEntry

FLV_EXTENSION = "flv"


def _media(attr: str) -> Callable[[RemoteEntry], Optional[str]]:
    def get(entry: RemoteEntry) -> Optional[str]:
        return getattr(entry.media, attr) if entry.media else None
    return get


# Size, Format and Dimensions are declared by the video template but the feed carries no value for them.
_PROJECTIONS: Dict[str, Callable[[RemoteEntry], Optional[str]]] = {
    "Url": _media("url"),
    "Id": lambda e: e.video_id,
    "Width": _media("width"),
    "Height": _media("height"),
    "Title": lambda e: e.title,
    "Keywords": lambda e: e.keywords,
    "Description": lambda e: e.description,
    "Extension": lambda e: FLV_EXTENSION,
    "Mime Type": _media("mime_type"),
    "Size": lambda e: None,
    "Format": lambda e: None,
    "Dimensions": lambda e: None,
}


def project(field_name: str, entry: RemoteEntry) -> str:
    """Value of `field_name` for `entry`; unknown fields and missing attributes give ""."""
    getter = _PROJECTIONS.get(field_name)
    if getter is None:
        return ""
    val = getter(entry)
    return "" if val is None else str(val)
