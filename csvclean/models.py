from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from .rules import REQUIRED_ENCODING


class DiffBlock(BaseModel):
    line: int = Field(description="1-based line number in the source file")
    before: str
    after: str

    def render(self) -> str:
        return f"---\n< {self.before}\n> {self.after}"


class CleanReport(BaseModel):
    encoding: str = Field(default=REQUIRED_ENCODING)
    lines: int = 0
    changed_lines: int = 0
    diffs: List[DiffBlock] = Field(default_factory=list)


class CleanedCsv(BaseModel):
    sha256: str
    encoding: str = Field(default=REQUIRED_ENCODING)
    content_b64: str


class CleanResponse(BaseModel):
    cleaned_csv: CleanedCsv
    report: CleanReport


class HealthResponse(BaseModel):
    ok: bool = True
