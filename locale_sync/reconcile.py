# locale_sync/reconcile.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterator, Optional, Sequence, Union

from .errors import LocaleSyncError, UnknownLanguage
from .schemas import (
    MISSING,
    ContentDiff,
    FileOutcome,
    FileStatus,
    LocaleContent,
    Present,
    ReferenceKey,
    ReferenceKeySet,
    SyncSettings,
    UnknownLanguagePolicy,
)
from .utils.jsonio import read_locale_file, render_content, write_atomic
from .utils.plurals import DEFAULT_RULE, PluralRule, rule_for

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


def resolve_rule(
    language_code: str,
    unknown_language: UnknownLanguagePolicy = UnknownLanguagePolicy.REJECT,
    path: Optional[PathLike] = None,
) -> PluralRule:
    try:
        return rule_for(language_code)
    except UnknownLanguage:
        if unknown_language != UnknownLanguagePolicy.FALLBACK:
            raise UnknownLanguage(language_code, path=path) from None
        log.warning(
            "No plural rule for language '%s'%s; assuming %d forms (%s). Add it to the plural table.",
            language_code,
            f" ({path})" if path else "",
            DEFAULT_RULE.nforms,
            DEFAULT_RULE.convention.value,
        )
        return DEFAULT_RULE


# -----------------------------------------------------------------------------
# Reference key set
# -----------------------------------------------------------------------------
def _strip_plural_suffix(key: str, suffixes: Sequence[str]) -> Optional[str]:
    for s in suffixes:
        if key.endswith(s) and len(key) > len(s):
            return key[: -len(s)]
    return None


def _reference_from(content: LocaleContent, suffixes: Sequence[str]) -> ReferenceKeySet:
    plural_bases = set()
    for key, value in content.items():
        if isinstance(value, LocaleContent):
            continue
        base = _strip_plural_suffix(key, suffixes)
        if base is not None:
            plural_bases.add(base)

    entries: Dict[str, ReferenceKey] = {}
    for key, value in content.items():
        if isinstance(value, LocaleContent):
            if key not in entries:
                entries[key] = ReferenceKey(key, children=_reference_from(value, suffixes))
            else:
                log.warning("Reference key '%s' is both an object and a string; keeping the string", key)
            continue
        base = _strip_plural_suffix(key, suffixes)
        name = key if base is None else base
        if name not in entries:
            entries[name] = ReferenceKey(name, pluralizable=name in plural_bases)
        elif entries[name].is_group:
            log.warning("Reference key '%s' is both an object and a string; ignoring '%s'", name, key)
    return tuple(entries.values())


def reference_from_content(
    content: LocaleContent,
    language_code: str,
    unknown_language: UnknownLanguagePolicy = UnknownLanguagePolicy.REJECT,
    path: Optional[PathLike] = None,
) -> ReferenceKeySet:
    """
    Derive base keys from the primary locale's content. Keys carrying one of
    the primary language's plural suffixes collapse into a single
    pluralizable base key, placed where its first form appears.
    """
    rule = resolve_rule(language_code, unknown_language, path)
    suffixes = sorted((s for s in rule.suffixes if s), key=len, reverse=True)
    return _reference_from(content, suffixes)


# -----------------------------------------------------------------------------
# Merge
# -----------------------------------------------------------------------------
def _merge(reference: ReferenceKeySet, rule: PluralRule, existing: LocaleContent) -> LocaleContent:
    out = LocaleContent()
    for ref in reference:
        if ref.is_group:
            current = existing.get(ref.name)
            if not isinstance(current, LocaleContent):
                current = LocaleContent()
            out[ref.name] = _merge(ref.children or (), rule, current)
            continue

        keys = rule.expand(ref.name) if ref.pluralizable else (ref.name,)
        for key in keys:
            current = existing.get(key)
            out[key] = current if isinstance(current, Present) else MISSING
    return out


def reconcile(
    reference: ReferenceKeySet,
    language_code: str,
    existing: LocaleContent,
    unknown_language: UnknownLanguagePolicy = UnknownLanguagePolicy.REJECT,
) -> LocaleContent:
    """
    Return the content ``existing`` should have for ``language_code``:
    every reference key expanded under the language's plural rule, in
    reference order, translated values kept, new slots MISSING and keys
    outside the reference dropped. Never mutates ``existing``.
    """
    rule = resolve_rule(language_code, unknown_language)
    return _merge(reference, rule, existing)


def _leaf_paths(content: LocaleContent, trail: str = "") -> Iterator[str]:
    for key, value in content.items():
        where = f"{trail}.{key}" if trail else key
        if isinstance(value, LocaleContent):
            yield from _leaf_paths(value, where)
        else:
            yield where


def diff_content(before: LocaleContent, after: LocaleContent) -> ContentDiff:
    old = list(_leaf_paths(before))
    new = list(_leaf_paths(after))
    old_set, new_set = set(old), set(new)
    return ContentDiff(
        added=[p for p in new if p not in old_set],
        removed=[p for p in old if p not in new_set],
    )


# -----------------------------------------------------------------------------
# Files
# -----------------------------------------------------------------------------
def _render(content: LocaleContent, settings: SyncSettings) -> str:
    return render_content(
        content,
        space=settings.space,
        line_endings=settings.line_endings,
        final_newline=settings.final_newline,
    )


def reconcile_file(
    path: PathLike,
    reference: ReferenceKeySet,
    language_code: str,
    settings: Optional[SyncSettings] = None,
    create: bool = False,
) -> FileOutcome:
    """
    Read one locale file, reconcile it and write it back if the result
    differs from what was read. Raises MalformedLocaleFile (file left
    untouched), UnknownLanguage under the reject policy, or WriteFailure.
    """
    settings = (settings or SyncSettings()).normalized()
    path = Path(path)

    is_new = not path.exists()
    if is_new and not create:
        raise LocaleSyncError("locale file does not exist", path=path)

    existing = LocaleContent() if is_new else read_locale_file(path)[1]

    rule = resolve_rule(language_code, settings.unknown_language, path)
    merged = _merge(reference, rule, existing)

    rendered = _render(merged, settings)
    changed = is_new or rendered != _render(existing, settings)
    diff = diff_content(existing, merged)

    written = False
    if changed and not settings.dry_run:
        write_atomic(path, rendered)
        written = True
        log.info(
            "%s %s [%s] (+%d -%d)",
            "Created" if is_new else "Updated",
            path,
            language_code,
            len(diff.added),
            len(diff.removed),
        )
    elif changed:
        log.info(
            "Would %s %s [%s] (+%d -%d)",
            "create" if is_new else "update",
            path,
            language_code,
            len(diff.added),
            len(diff.removed),
        )
    else:
        log.debug("Unchanged %s [%s]", path, language_code)

    if is_new:
        status = FileStatus.CREATED if written else FileStatus.WOULD_CREATE
    elif changed:
        status = FileStatus.CHANGED
    else:
        status = FileStatus.UNCHANGED

    return FileOutcome(
        path=str(path),
        language=language_code,
        status=status,
        added=diff.added,
        removed=diff.removed,
        written=written,
    )


def failed_outcome(path: PathLike, language_code: Optional[str], error: LocaleSyncError) -> FileOutcome:
    return FileOutcome(
        path=str(path),
        language=language_code,
        status=FileStatus.FAILED,
        error=error.to_dict(),
    )
