# locale_sync/sync.py
from __future__ import annotations

import glob
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from .errors import LocaleSyncError, MissingPrimaryFile
from .reconcile import failed_outcome, reconcile_file, reference_from_content
from .schemas import FileOutcome, ReferenceKeySet, SyncReport, SyncSettings
from .utils.jsonio import read_locale_file
from .utils.logging_config import setup_logging
from .utils.plurals import is_known_language, normalize_language

log = logging.getLogger(__name__)

PathLike = Union[str, Path]

FLAT = "flat"          # locales/<lang>.json
NAMESPACED = "ns"      # locales/<lang>/<namespace>.json


# -----------------------------------------------------------------------------
# Discovery
# -----------------------------------------------------------------------------
def discover_files(patterns: List[str], root: Optional[PathLike] = None) -> List[Path]:
    base = Path(root) if root is not None else Path.cwd()
    found = set()
    for pattern in patterns:
        full = pattern if os.path.isabs(pattern) else str(base / pattern)
        for match in glob.glob(full, recursive=True):
            p = Path(match)
            if p.is_file():
                found.add(p)
    return sorted(found)


def language_from_path(path: PathLike) -> Tuple[str, str]:
    """
    Return (language code, layout) for a locale file. The file name wins
    when it is a known language; otherwise the parent directory is tried.
    Unknown names fall through to the file stem.
    """
    p = Path(path)
    if is_known_language(p.stem):
        return p.stem, FLAT
    if is_known_language(p.parent.name):
        return p.parent.name, NAMESPACED
    return p.stem, FLAT


@dataclass
class FileGroup:
    """Locale files that share one primary file, one per language."""

    layout: str
    root: Path
    name: str = ""
    suffix: str = ".json"
    members: List[Tuple[Path, str]] = field(default_factory=list)

    def path_for(self, language_code: str) -> Path:
        if self.layout == NAMESPACED:
            return self.root / language_code / self.name
        return self.root / f"{language_code}{self.suffix}"

    def find(self, language_code: str) -> Optional[Tuple[Path, str]]:
        want = normalize_language(language_code)
        for member in self.members:
            if normalize_language(member[1]) == want:
                return member
        return None


def group_files(paths: List[Path]) -> List[FileGroup]:
    detected = {path: language_from_path(path) for path in paths}

    # <root>/<lang>/<ns>.json where at least one <lang> is a known language
    namespaces = {
        (path.parent.parent, path.name)
        for path, (_, layout) in detected.items()
        if layout == NAMESPACED
    }

    groups: Dict[Tuple[str, Path, str], FileGroup] = {}
    for path in paths:
        language, layout = detected[path]
        if (
            layout == FLAT
            and not is_known_language(language)
            and (path.parent.parent, path.name) in namespaces
        ):
            # unknown language directory next to known ones
            language, layout = path.parent.name, NAMESPACED
        if layout == NAMESPACED:
            key = (layout, path.parent.parent, path.name)
            group = groups.setdefault(key, FileGroup(layout, path.parent.parent, path.name))
        else:
            key = (layout, path.parent, "")
            group = groups.setdefault(key, FileGroup(layout, path.parent, suffix=path.suffix))
        group.members.append((path, language))
    return list(groups.values())


# -----------------------------------------------------------------------------
# Sync
# -----------------------------------------------------------------------------
def _load_reference(group: FileGroup, settings: SyncSettings) -> ReferenceKeySet:
    primary = group.find(settings.primary)
    if primary is None:
        raise MissingPrimaryFile(settings.primary, path=group.path_for(settings.primary))
    path, language = primary
    _, content = read_locale_file(path)
    return reference_from_content(content, language, settings.unknown_language, path)


def _sync_group(group: FileGroup, settings: SyncSettings) -> List[FileOutcome]:
    outcomes: List[FileOutcome] = []

    try:
        reference = _load_reference(group, settings)
    except LocaleSyncError as e:
        log.error("Cannot take reference keys for %s: %s", group.path_for(settings.primary), e)
        for path, language in group.members:
            if str(path) == e.path:
                err = e
            else:
                err = MissingPrimaryFile(settings.primary, path=path, reason=f"reference unavailable: {e}")
            outcomes.append(failed_outcome(path, language, err))
        return outcomes

    # primary first so its own plural layout settles before the others
    primary = group.find(settings.primary)
    members = [primary] + [m for m in group.members if m is not primary]

    targets: List[Tuple[Path, str, bool]] = [(p, lang, False) for p, lang in members]
    if settings.create_resources:
        for language in settings.languages:
            if group.find(language) is None:
                targets.append((group.path_for(language), language, True))

    for path, language, create in targets:
        try:
            outcomes.append(reconcile_file(path, reference, language, settings, create=create))
        except LocaleSyncError as e:
            log.error("Failed to sync %s: %s", path, e.message)
            outcomes.append(failed_outcome(path, language, e))
    return outcomes


def sync(settings: Optional[SyncSettings] = None, root: Optional[PathLike] = None) -> SyncReport:
    """
    Reconcile every locale file matched by ``settings.files`` against the
    primary language file of its group. Files are handled independently;
    a failure is recorded in the report and the run moves on.
    """
    settings = (settings or SyncSettings()).normalized()
    paths = discover_files(settings.files, root)
    if not paths:
        log.warning("No locale files matched %s", ", ".join(settings.files))

    report = SyncReport()
    for group in group_files(paths):
        report.files.extend(_sync_group(group, settings))

    report.ok = not report.failed
    log.info(
        "Synced %d locale files: %d changed, %d created, %d would create, %d unchanged, %d failed%s",
        len(report.files),
        len(report.changed),
        len(report.created),
        len(report.would_create),
        len(report.unchanged),
        len(report.failed),
        " (dry run)" if settings.dry_run else "",
    )
    return report


def run() -> int:
    setup_logging()
    report = sync(SyncSettings.from_env())
    return 0 if report.ok else 1


if __name__ == "__main__":
    raise SystemExit(run())
