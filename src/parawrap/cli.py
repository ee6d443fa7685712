from __future__ import annotations

from pathlib import Path
from typing import List, Optional
import json
import sys

import typer

from parawrap.config import RunOptions
from parawrap.logging import configure_logging
from parawrap.runner import FileReport, RunReport, format_source, lint_source, run

app = typer.Typer(add_completion=False)

_STDIN_ALIAS = "-"
_STDIN_LABEL = "<stdin>"
_STDOUT_ALIAS = "-"

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_ERRORS = 2


@app.callback()
def main(
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True, help="Increase log verbosity (repeatable)."
    ),
    log_json: bool = typer.Option(False, "--log-json", help="Emit logs as JSON on stderr."),
) -> None:
    """Check and fix parameter list wrapping in Kotlin sources."""
    configure_logging(json_mode=log_json, verbosity=verbose)


def _options(config: Path | None, indent_size: int | None) -> RunOptions:
    return RunOptions.from_config(config_path=config, indent_size=indent_size)


def _split_stdin(paths: List[Path] | None) -> tuple[list[Path], bool]:
    if not paths:
        raise typer.BadParameter("at least one path is required")
    files = [path for path in paths if str(path) != _STDIN_ALIAS]
    return files, len(files) != len(paths)


def _write_text_to_target(target: str | Path, payload: str) -> None:
    text = payload if not payload or payload.endswith("\n") else payload + "\n"
    if str(target) == _STDOUT_ALIAS:
        sys.stdout.write(text)
        sys.stdout.flush()
        return
    Path(target).write_text(text, encoding="utf-8")


def _lint_entries(report: RunReport) -> list[dict[str, object]]:
    entries: list[dict[str, object]] = []
    for file_report in report.files:
        for violation in file_report.violations:
            entries.append(violation.as_entry(file_report.path))
    return entries


def _write_lint_jsonl(target: Path, entries: list[dict[str, object]]) -> None:
    payload = "\n".join(json.dumps(entry, sort_keys=True) for entry in entries)
    _write_text_to_target(target, payload)


def _write_lint_sarif(target: Path, entries: list[dict[str, object]]) -> None:
    results: list[dict[str, object]] = []
    rules: dict[str, dict[str, object]] = {}
    for entry in entries:
        code = str(entry.get("code") or "")
        rules[code] = {
            "id": code,
            "name": code,
            "shortDescription": {"text": code},
        }
        results.append(
            {
                "ruleId": code,
                "level": "warning",
                "message": {"text": str(entry.get("message") or code)},
                "locations": [
                    {
                        "physicalLocation": {
                            "artifactLocation": {"uri": str(entry.get("path") or "")},
                            "region": {
                                "startLine": int(entry.get("line") or 1),
                                "startColumn": int(entry.get("col") or 1),
                            },
                        }
                    }
                ],
            }
        )
    sarif = {
        "$schema": "https://json.schemastore.org/sarif-2.1.0.json",
        "version": "2.1.0",
        "runs": [
            {
                "tool": {"driver": {"name": "parawrap", "rules": list(rules.values())}},
                "results": results,
            }
        ],
    }
    _write_text_to_target(target, json.dumps(sarif, indent=2, sort_keys=True))


def _emit_file_report(file_report: FileReport, *, err: bool = False) -> None:
    if file_report.error is not None:
        typer.secho(f"{file_report.path}: {file_report.error}", err=True, fg=typer.colors.RED)
        return
    for violation in file_report.violations:
        typer.echo(violation.render(file_report.path), err=err)


def _emit_report(report: RunReport, *, json_output: bool, err: bool = False) -> None:
    if json_output:
        payload = report.to_dto().model_dump()
        typer.echo(json.dumps(payload, indent=2, sort_keys=True), err=err)
        return
    for file_report in report.files:
        _emit_file_report(file_report, err=err)


def _exit_code(report: RunReport, *, fail_on_violations: bool) -> int:
    if report.error_count:
        return EXIT_ERRORS
    if fail_on_violations and report.violation_count:
        return EXIT_VIOLATIONS
    return EXIT_OK


@app.command("lint")
def lint(
    paths: List[Path] = typer.Argument(None, help="Files or directories; '-' reads stdin."),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to parawrap.toml."),
    indent_size: Optional[int] = typer.Option(None, "--indent-size", min=1),
    json_output: bool = typer.Option(False, "--json", help="Print a JSON report."),
    lint_jsonl: Optional[Path] = typer.Option(None, "--lint-jsonl"),
    lint_sarif: Optional[Path] = typer.Option(None, "--lint-sarif"),
) -> None:
    """Report parameter lists that break the wrapping rule."""
    files, use_stdin = _split_stdin(paths)
    options = _options(config, indent_size)
    report = run(files, options, mode="lint")
    if use_stdin:
        report.files.append(lint_source(_STDIN_LABEL, sys.stdin.read(), options))
    _emit_report(report, json_output=json_output)
    entries = _lint_entries(report)
    if lint_jsonl is not None:
        _write_lint_jsonl(lint_jsonl, entries)
    if lint_sarif is not None:
        _write_lint_sarif(lint_sarif, entries)
    raise typer.Exit(code=_exit_code(report, fail_on_violations=True))


@app.command("format")
def format_command(
    paths: List[Path] = typer.Argument(None, help="Files or directories; '-' reads stdin."),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to parawrap.toml."),
    indent_size: Optional[int] = typer.Option(None, "--indent-size", min=1),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report without rewriting files."),
    json_output: bool = typer.Option(False, "--json", help="Print a JSON report."),
) -> None:
    """Rewrite parameter lists so they follow the wrapping rule."""
    files, use_stdin = _split_stdin(paths)
    options = _options(config, indent_size)
    report = run(files, options, mode="format", write=not dry_run)
    formatted = None
    if use_stdin:
        stdin_report, formatted = format_source(_STDIN_LABEL, sys.stdin.read(), options)
        report.files.append(stdin_report)
    # stdout carries the formatted text when reading stdin, so the report goes to stderr
    _emit_report(report, json_output=json_output, err=use_stdin)
    if formatted is not None:
        sys.stdout.write(formatted)
        sys.stdout.flush()
    raise typer.Exit(code=_exit_code(report, fail_on_violations=False))
