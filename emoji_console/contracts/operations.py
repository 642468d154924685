"""Result payloads returned by the emoji asset operations."""

from pydantic import Field

from .common import BaseContract
from .emoji import SetMapReport


class BuildBaseResult(BaseContract):
    count: int
    out_path: str = Field(..., alias="outPath")
    source: str = Field(..., description="'unicode' or 'assets'")


class MergeResult(BaseContract):
    """Outcome of one enrichment pass over the canonical table."""

    updated: int = 0
    total: int = 0
    conflicts: int = Field(0, description="Shortcodes skipped because another entry owns them")


class BuildSetMapResult(BaseContract):
    set_key: str = Field(..., alias="set")
    count: int
    manual_count: int = Field(0, alias="manualCount")
    debug_report: str = Field(..., alias="debugReport")
    debug: SetMapReport


class AssetStatus(BaseContract):
    exists: bool
    file_count: int = Field(0, alias="fileCount")
    files: list[str] = Field(default_factory=list)


class SetMapStatus(BaseContract):
    exists: bool
    size: int = 0
    manual_count: int = Field(0, alias="manualCount")
    date: str | None = Field(None, description="Last modified date, YYYY-MM-DD")


class DownloadResult(BaseContract):
    set_key: str = Field(..., alias="set")
    version: str
    file_count: int = Field(..., alias="fileCount")


class RemoveResult(BaseContract):
    set_key: str = Field(..., alias="set")
    status: str


class SetSummary(BaseContract):
    """Provider listing entry for the dev console."""

    key: str
    name: str
    asset_dir: str = Field(..., alias="assetDir")
    url_prefix: str = Field(..., alias="urlPrefix")
    ext: str
    naming: str
    notes: str | None = None
    install_instructions: str | None = Field(None, alias="installInstructions")
    downloadable: bool = False
    version: str | None = None
    active: bool = False
    fallback: bool = False
