"""Models for configured report sources."""

from enum import Enum

from pydantic import BaseModel, Field


class SourceType(str, Enum):
    """Kind of repository a source tracks."""

    THEME = "theme"
    PLUGIN = "plugin"
    MU_PLUGIN = "mu-plugin"

    @property
    def label(self) -> str:
        return _SOURCE_TYPE_LABELS[self]


_SOURCE_TYPE_LABELS = {
    SourceType.THEME: "Theme",
    SourceType.PLUGIN: "Plugin",
    SourceType.MU_PLUGIN: "MU Plugin",
}


class Source(BaseModel):
    """A configured repository whose report is fetched from a URL."""

    id: str = Field(min_length=1, description="Stable opaque identifier")
    type: SourceType = Field(default=SourceType.PLUGIN)
    name: str = Field(min_length=1, description="Display name")
    url: str = Field(min_length=1, description="Absolute URL of the raw JSON report")
    token: str = Field(default="", description="Optional bearer token for private repos")

    @property
    def label(self) -> str:
        """Display label in the form 'Plugin — My Plugin'."""
        return f"{self.type.label} — {self.name}"
