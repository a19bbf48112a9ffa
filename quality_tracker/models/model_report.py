"""Models for static-analysis reports and their derived summaries."""

from pydantic import BaseModel, ConfigDict, Field, computed_field

ERROR_TYPE = "ERROR"
WARNING_TYPE = "WARNING"


class Summary(BaseModel):
    """Normalized issue counts derived from a report."""

    model_config = ConfigDict(frozen=True)

    errors: int = Field(default=0, ge=0, description="Messages of type ERROR")
    warnings: int = Field(default=0, ge=0, description="Messages of type WARNING")
    files_with_issues: int = Field(
        default=0, ge=0, description="Files with a non-empty messages list"
    )


class ReportMessage(BaseModel):
    """A single decoded report message.

    Decoding never fails: missing or mistyped fields fall back to defaults.
    """

    type: str = Field(default="", description="Upper-cased message type")
    line: int = Field(default=0, ge=0)
    column: int = Field(default=0, ge=0)
    message: str = Field(default="")
    rule: str = Field(default="", description="Sniff/rule identifier")

    @property
    def is_error(self) -> bool:
        return self.type == ERROR_TYPE

    @property
    def is_warning(self) -> bool:
        return self.type == WARNING_TYPE


class ReportFile(BaseModel):
    """All decoded messages for one file of a report."""

    path: str
    messages: list[ReportMessage] = Field(default_factory=list)

    @computed_field
    @property
    def errors(self) -> int:
        return sum(1 for m in self.messages if m.is_error)

    @computed_field
    @property
    def warnings(self) -> int:
        return sum(1 for m in self.messages if m.is_warning)


class ParsedReport(BaseModel):
    """Typed view over a raw report, used for issue drill-down."""

    files: list[ReportFile] = Field(default_factory=list)


class FileIssues(BaseModel):
    """Drill-down row: one file's counts and a bounded slice of its messages."""

    path: str
    errors: int = Field(default=0, ge=0)
    warnings: int = Field(default=0, ge=0)
    issue_count: int = Field(default=0, ge=0, description="Total messages in the file")
    messages: list[ReportMessage] = Field(default_factory=list)
    truncated: bool = Field(default=False, description="Messages were cut at the per-file limit")
