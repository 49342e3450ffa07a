"""
Golden-file tests: each case under tests/fixtures has a project/ tree, the
expected/ tree after a sync, and the settings.json used for the run.
"""

import json
from pathlib import Path

import pytest

from locale_sync.schemas import SyncSettings
from locale_sync.sync import sync

FIXTURES_DIR = Path(__file__).parent / "fixtures"
CASES = sorted(p.name for p in FIXTURES_DIR.iterdir() if (p / "expected").is_dir())


def _tree(root: Path):
    return {
        p.relative_to(root).as_posix(): p.read_text(encoding="utf-8")
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


def _masked(text: str) -> str:
    """Key structure only, values replaced."""
    data = json.loads(text, object_hook=lambda d: {k: v if isinstance(v, dict) else "<value>" for k, v in d.items()})
    return json.dumps(data, indent=2)


@pytest.mark.parametrize("case", CASES)
def test_fixture(case, fixture_case):
    actual_root = fixture_case(case)
    settings = SyncSettings(**json.loads((FIXTURES_DIR / case / "settings.json").read_text(encoding="utf-8")))

    report = sync(settings, root=actual_root)
    assert report.ok

    expected = _tree(FIXTURES_DIR / case / "expected")
    actual = _tree(actual_root)
    assert sorted(actual) == sorted(expected)
    for name, text in expected.items():
        assert _masked(actual[name]) == _masked(text), name
        assert actual[name] == text, name


@pytest.mark.parametrize("case", CASES)
def test_fixture_is_stable(case, fixture_case):
    actual_root = fixture_case(case)
    settings = SyncSettings(**json.loads((FIXTURES_DIR / case / "settings.json").read_text(encoding="utf-8")))

    sync(settings, root=actual_root)
    second = sync(settings, root=actual_root)

    assert second.ok
    assert second.changed == [] and second.created == []
