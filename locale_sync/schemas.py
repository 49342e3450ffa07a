# locale_sync/schemas.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field


# -----------------------------------------------------------------------------
# Locale values and content
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Present:
    value: str


class _Missing:
    """Untranslated slot. Rendered as an empty string on disk."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


class LocaleContent(dict):
    """
    Ordered key -> value tree of one locale file. Values are ``Present``,
    ``MISSING`` or a nested ``LocaleContent``.

    Unlike a plain dict, equality also compares key order: a reordered file
    is a different file as far as write-back is concerned.
    """

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, dict):
            return NotImplemented
        return list(self.items()) == list(other.items())

    def __ne__(self, other: object) -> bool:
        eq = self.__eq__(other)
        if eq is NotImplemented:
            return eq
        return not eq

    __hash__ = None  # type: ignore[assignment]

    def to_plain(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for key, value in self.items():
            if isinstance(value, LocaleContent):
                out[key] = value.to_plain()
            elif isinstance(value, Present):
                out[key] = value.value
            else:
                out[key] = ""
        return out


# -----------------------------------------------------------------------------
# Reference key set
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ReferenceKey:
    name: str
    pluralizable: bool = False
    # set for nested objects; leaves keep None
    children: Optional[Tuple["ReferenceKey", ...]] = None

    @property
    def is_group(self) -> bool:
        return self.children is not None


ReferenceKeySet = Tuple[ReferenceKey, ...]


@dataclass
class ContentDiff:
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.added or self.removed)


# -----------------------------------------------------------------------------
# Settings
# -----------------------------------------------------------------------------
class UnknownLanguagePolicy(str, Enum):
    REJECT = "reject"
    FALLBACK = "fallback"


class LineEndings(str, Enum):
    LF = "lf"
    CRLF = "crlf"


def _env_list(name: str) -> Optional[List[str]]:
    raw = os.getenv(name)
    if raw is None:
        return None
    return [p.strip() for p in raw.split(",") if p.strip()]


class SyncSettings(BaseModel):
    # glob patterns, "**" is recursive
    files: List[str] = Field(default_factory=lambda: ["locales/**/*.json"])
    primary: str = "en"

    # languages that must exist; see create_resources
    languages: List[str] = Field(default_factory=list)
    create_resources: bool = False

    # output formatting
    space: Union[int, str] = 2
    line_endings: LineEndings = LineEndings.LF
    final_newline: bool = True

    unknown_language: UnknownLanguagePolicy = UnknownLanguagePolicy.FALLBACK
    dry_run: bool = False

    def normalized(self) -> "SyncSettings":
        """Coerce defaults and expected types."""
        s = self.model_copy(deep=True)

        s.files = [f.strip() for f in (s.files or []) if f and f.strip()] or ["locales/**/*.json"]
        s.primary = (s.primary or "en").strip()
        s.languages = [lang.strip() for lang in (s.languages or []) if lang and lang.strip()]

        if isinstance(s.space, str):
            s.space = int(s.space) if s.space.strip().isdigit() else s.space
        if isinstance(s.space, int) and s.space < 0:
            s.space = 0

        return s

    @classmethod
    def from_env(cls, **overrides: Any) -> "SyncSettings":
        """
        Read LOCALE_SYNC_* variables (a .env file in the working directory is
        honoured). Keyword overrides win over the environment.
        """
        load_dotenv(find_dotenv(usecwd=True))

        data: Dict[str, Any] = {}
        files = _env_list("LOCALE_SYNC_FILES")
        if files is not None:
            data["files"] = files
        languages = _env_list("LOCALE_SYNC_LANGUAGES")
        if languages is not None:
            data["languages"] = languages
        for key in ("primary", "create_resources", "space", "line_endings",
                    "final_newline", "unknown_language", "dry_run"):
            raw = os.getenv(f"LOCALE_SYNC_{key.upper()}")
            if raw is not None:
                data[key] = raw.strip().lower() if key in ("line_endings", "unknown_language") else raw
        data.update(overrides)
        return cls(**data).normalized()


# -----------------------------------------------------------------------------
# Outcomes
# -----------------------------------------------------------------------------
class FileStatus(str, Enum):
    CHANGED = "changed"
    UNCHANGED = "unchanged"
    CREATED = "created"
    WOULD_CREATE = "would_create"  # dry run, file not written
    FAILED = "failed"


class FileOutcome(BaseModel):
    path: str
    language: Optional[str] = None
    status: FileStatus
    added: List[str] = Field(default_factory=list)
    removed: List[str] = Field(default_factory=list)
    written: bool = False
    error: Optional[Dict[str, Any]] = None


class SyncReport(BaseModel):
    ok: bool = True
    files: List[FileOutcome] = Field(default_factory=list)

    def _with(self, status: FileStatus) -> List[FileOutcome]:
        return [f for f in self.files if f.status == status]

    @property
    def changed(self) -> List[FileOutcome]:
        return self._with(FileStatus.CHANGED)

    @property
    def unchanged(self) -> List[FileOutcome]:
        return self._with(FileStatus.UNCHANGED)

    @property
    def created(self) -> List[FileOutcome]:
        return self._with(FileStatus.CREATED)

    @property
    def would_create(self) -> List[FileOutcome]:
        return self._with(FileStatus.WOULD_CREATE)

    @property
    def failed(self) -> List[FileOutcome]:
        return self._with(FileStatus.FAILED)
