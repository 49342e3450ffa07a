"""
Pytest configuration and fixtures for locale-sync tests.
"""

import json
import shutil
from pathlib import Path
from typing import Callable, Dict

import pytest

from locale_sync.schemas import LocaleContent, ReferenceKey
from locale_sync.utils.jsonio import parse_content

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def shop_reference():
    """title, pluralizable apple, and a nested cart group."""
    return (
        ReferenceKey("title"),
        ReferenceKey("apple", pluralizable=True),
        ReferenceKey(
            "cart",
            children=(
                ReferenceKey("item", pluralizable=True),
                ReferenceKey("empty"),
            ),
        ),
    )


@pytest.fixture
def content() -> Callable[..., LocaleContent]:
    """Build LocaleContent from plain JSON-style data."""
    def _build(data: Dict = None, **kwargs) -> LocaleContent:
        return parse_content(json.dumps(dict(data or {}, **kwargs)))
    return _build


@pytest.fixture
def write_json(tmp_path: Path):
    def _write(relpath: str, data) -> Path:
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture
def fixture_case(tmp_path: Path):
    """Copy tests/fixtures/<case>/project into a temp dir and return it."""
    def _copy(case: str) -> Path:
        target = tmp_path / case
        shutil.copytree(FIXTURES_DIR / case / "project", target)
        return target
    return _copy
