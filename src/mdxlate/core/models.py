"""Data models shared by the extract, reinject, and pipeline stages"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Snippet(BaseModel):
    """One protected fragment: token id and the verbatim content it replaces."""
    model_config = ConfigDict(frozen=True)

    id: str
    code: str


@dataclass
class MaskedDoc:
    """Extraction result: masked text plus snippets in emission order."""
    text: str
    snippets: list[Snippet] = field(default_factory=list)

    @property
    def tokens(self) -> list[str]:
        return [s.id for s in self.snippets]


class FailedDoc(BaseModel):
    file: str
    reason: str


class BuildReport(BaseModel):
    """Per-run audit record: fully translated docs vs. fallbacks."""
    success: list[str] = []
    failed: list[FailedDoc] = []

    @property
    def total(self) -> int:
        return len(self.success) + len(self.failed)

    def add(self, result: "DocResult") -> None:
        if result.ok:
            self.success.append(str(result.source))
        else:
            self.failed.append(FailedDoc(file=str(result.source), reason=result.reason or "unknown error"))


@dataclass
class DocResult:
    """Outcome of one document's pipeline; aggregated by the coordinator."""
    source: Path
    output: Optional[Path] = None
    ok:     bool = True
    reason: Optional[str] = None     # "<stage> error: <message>" on failure
