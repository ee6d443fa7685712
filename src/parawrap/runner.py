"""Run the wrapping rule over files.

This is the host side of the rule: it reads files, parses them, reports parse
failures per file and writes corrected text back. One file failing never
stops the others.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Literal

import structlog

from parawrap.config import RunOptions
from parawrap.exceptions import ParseFailure
from parawrap.rules.engine import ParameterListWrappingRule
from parawrap.rules.model import Violation
from parawrap.schema import FileReportDTO, RunReportDTO, ViolationDTO
from parawrap.syntax.parser import parse

logger = structlog.get_logger(__name__)

Mode = Literal["lint", "format"]


@dataclass
class FileReport:
    path: str
    violations: list[Violation] = field(default_factory=list)
    changed: bool = False
    error: str | None = None

    def to_dto(self) -> FileReportDTO:
        return FileReportDTO(
            path=self.path,
            violations=[
                ViolationDTO(
                    line=violation.line,
                    column=violation.column,
                    rule_id=violation.rule_id,
                    message=violation.message,
                )
                for violation in self.violations
            ],
            changed=self.changed,
            error=self.error,
        )


@dataclass
class RunReport:
    mode: Mode
    files: list[FileReport] = field(default_factory=list)

    @property
    def violation_count(self) -> int:
        return sum(len(report.violations) for report in self.files)

    @property
    def error_count(self) -> int:
        return sum(1 for report in self.files if report.error is not None)

    def to_dto(self) -> RunReportDTO:
        return RunReportDTO(
            mode=self.mode,
            files=[report.to_dto() for report in self.files],
            violation_count=self.violation_count,
            error_count=self.error_count,
        )


def iter_source_files(
    paths: Iterable[Path],
    *,
    extensions: Iterable[str],
    exclude: Iterable[str] = (),
) -> list[Path]:
    """Expand ``paths`` into the files to process, in a stable order.

    Files named explicitly are always kept; directories are searched
    recursively for the configured extensions, skipping excluded directory
    names.
    """
    wanted = {extension.lstrip(".") for extension in extensions}
    skipped = set(exclude)
    found: list[Path] = []
    seen: set[Path] = set()
    for path in paths:
        if path.is_dir():
            candidates = []
            for candidate in sorted(path.rglob("*")):
                if not candidate.is_file():
                    continue
                if candidate.suffix.lstrip(".") not in wanted:
                    continue
                if skipped.intersection(candidate.relative_to(path).parts[:-1]):
                    continue
                candidates.append(candidate)
        else:
            candidates = [path]
        for candidate in candidates:
            if candidate in seen:
                continue
            seen.add(candidate)
            found.append(candidate)
    return found


def lint_source(label: str, source: str, options: RunOptions) -> FileReport:
    rule = ParameterListWrappingRule(options.indent_size)
    try:
        tree = parse(source)
    except ParseFailure as exc:
        logger.warning("parse_failed", path=label, error=str(exc))
        return FileReport(path=label, error=str(exc))
    violations = rule.check(tree)
    logger.info("file_checked", path=label, violations=len(violations))
    return FileReport(path=label, violations=violations)


def format_source(label: str, source: str, options: RunOptions) -> tuple[FileReport, str]:
    rule = ParameterListWrappingRule(options.indent_size)
    try:
        tree = parse(source)
    except ParseFailure as exc:
        logger.warning("parse_failed", path=label, error=str(exc))
        return FileReport(path=label, error=str(exc)), source
    violations, tree = rule.fix(tree)
    formatted = tree.text()
    changed = formatted != source
    logger.info("file_formatted", path=label, violations=len(violations), changed=changed)
    return FileReport(path=label, violations=violations, changed=changed), formatted


def _read(path: Path) -> str | FileReport:
    try:
        # newline="" keeps CRLF line endings intact
        with path.open("r", encoding="utf-8", newline="") as handle:
            return handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("file_skipped", path=str(path), error=str(exc))
        return FileReport(path=str(path), error=f"Failed to read {path}: {exc}")


def lint_file(path: Path, options: RunOptions) -> FileReport:
    source = _read(path)
    if isinstance(source, FileReport):
        return source
    return lint_source(str(path), source, options)


def format_file(path: Path, options: RunOptions, *, write: bool = True) -> FileReport:
    source = _read(path)
    if isinstance(source, FileReport):
        return source
    report, formatted = format_source(str(path), source, options)
    if write and report.changed:
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(formatted)
    return report


def run(
    paths: Iterable[Path],
    options: RunOptions,
    *,
    mode: Mode = "lint",
    write: bool = True,
) -> RunReport:
    report = RunReport(mode=mode)
    files = iter_source_files(paths, extensions=options.extensions, exclude=options.exclude)
    for path in files:
        if mode == "format":
            report.files.append(format_file(path, options, write=write))
        else:
            report.files.append(lint_file(path, options))
    return report
