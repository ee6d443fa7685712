from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class ViolationDTO(BaseModel):
    line: int
    column: int
    rule_id: str
    message: str


class FileReportDTO(BaseModel):
    path: str
    violations: List[ViolationDTO] = []
    changed: bool = False
    error: Optional[str] = None


class RunReportDTO(BaseModel):
    mode: str
    files: List[FileReportDTO] = []
    violation_count: int = 0
    error_count: int = 0
