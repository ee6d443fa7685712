from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

from parawrap.rules.layout import DEFAULT_INDENT_SIZE
from parawrap.rules.model import RULE_ID

DEFAULT_CONFIG_NAME = "parawrap.toml"
DEFAULT_EXTENSIONS: tuple[str, ...] = ("kt", "kts")
DEFAULT_EXCLUDE: tuple[str, ...] = ("build", ".git", ".gradle")

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def rule_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get(RULE_ID, {})
    return section if isinstance(section, dict) else {}


def files_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("files", {})
    return section if isinstance(section, dict) else {}


def _normalize_name_list(value: TomlValue) -> list[str]:
    items: list[str] = []
    if value is None:
        return items
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",") if part.strip()]
    elif isinstance(value, (list, tuple, set)):
        for item in value:
            if isinstance(item, str):
                items.extend([part.strip() for part in item.split(",") if part.strip()])
    return [item for item in items if item]


def _as_int(value: TomlValue, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def indent_size_from(section: TomlTable | None) -> int:
    if not isinstance(section, dict):
        return DEFAULT_INDENT_SIZE
    size = _as_int(section.get("indent_size"), DEFAULT_INDENT_SIZE)
    return size if size > 0 else DEFAULT_INDENT_SIZE


def extensions_from(section: TomlTable | None) -> list[str]:
    if not isinstance(section, dict) or "extensions" not in section:
        return list(DEFAULT_EXTENSIONS)
    return [name.lstrip(".") for name in _normalize_name_list(section.get("extensions"))]


def exclude_from(section: TomlTable | None) -> list[str]:
    if not isinstance(section, dict) or "exclude" not in section:
        return list(DEFAULT_EXCLUDE)
    return _normalize_name_list(section.get("exclude"))


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged


@dataclass(frozen=True)
class RunOptions:
    indent_size: int = DEFAULT_INDENT_SIZE
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    exclude: tuple[str, ...] = DEFAULT_EXCLUDE

    @classmethod
    def from_config(
        cls,
        *,
        root: Path | None = None,
        config_path: Path | None = None,
        indent_size: int | None = None,
    ) -> RunOptions:
        rule = merge_payload(
            {"indent_size": indent_size},
            rule_defaults(root=root, config_path=config_path),
        )
        files = files_defaults(root=root, config_path=config_path)
        return cls(
            indent_size=indent_size_from(rule),
            extensions=tuple(extensions_from(files)),
            exclude=tuple(exclude_from(files)),
        )
