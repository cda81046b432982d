"""Records returned by the NeoCities API."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# RFC 1123 with a numeric zone, e.g. "Mon, 02 Jan 2006 15:04:05 -0700"
NEO_TIME_FORMAT = "%a, %d %b %Y %H:%M:%S %z"


def parse_neo_time(value: Any) -> Optional[datetime]:
    """Parse a NeoCities timestamp.

    Args:
        value: Timestamp string, an existing datetime, or None

    Returns:
        Timezone-aware datetime, or None when the API sent no timestamp

    Raises:
        ValueError: If the string does not match NEO_TIME_FORMAT
    """
    if value is None or isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected timestamp string, got {type(value).__name__}")
    return datetime.strptime(value, NEO_TIME_FORMAT)


class SiteInfo(BaseModel):
    """Information about a site, filled in by the info endpoint."""

    model_config = ConfigDict(extra="ignore")

    sitename: Optional[str] = Field(default=None, description="Site name")
    hits: int = Field(default=0, description="Total hit count")
    views: Optional[int] = Field(default=None, description="Total view count")
    created_at: Optional[datetime] = Field(
        default=None, description="Site creation timestamp"
    )
    last_updated: Optional[datetime] = Field(
        default=None, description="Last update timestamp"
    )
    domain: Optional[str] = Field(default=None, description="Custom domain, if any")
    tags: List[str] = Field(default_factory=list, description="Site tags")

    @field_validator("created_at", "last_updated", mode="before")
    @classmethod
    def _parse_timestamps(cls, v: Any) -> Optional[datetime]:
        return parse_neo_time(v)

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, v: Any) -> Any:
        return [] if v is None else v


class SiteFile(BaseModel):
    """A file in a NeoCities website, as returned by the list endpoint."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    path: str = Field(..., description="Path of the file relative to the site root")
    is_directory: bool = Field(default=False, description="Whether this is a directory")
    size: int = Field(default=0, description="Size in bytes")
    updated_at: Optional[datetime] = Field(
        default=None, description="Last update timestamp"
    )
    sha1_hash: Optional[str] = Field(default=None, description="SHA1 of the contents")

    @field_validator("updated_at", mode="before")
    @classmethod
    def _parse_updated_at(cls, v: Any) -> Optional[datetime]:
        return parse_neo_time(v)


class APIError(BaseModel):
    """An error message returned by the NeoCities API."""

    result: str = ""
    error_type: str = ""
    message: str = ""
