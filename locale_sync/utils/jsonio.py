from __future__ import annotations

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from ..errors import LocaleSyncError, MalformedLocaleFile, WriteFailure
from ..schemas import MISSING, LineEndings, LocaleContent, Present

PathLike = Union[str, Path]


def _to_content(data: Dict[str, Any], path: PathLike, trail: str = "") -> LocaleContent:
    out = LocaleContent()
    for key, value in data.items():
        where = f"{trail}.{key}" if trail else key
        if isinstance(value, dict):
            out[key] = _to_content(value, path, where)
        elif isinstance(value, str):
            out[key] = Present(value) if value else MISSING
        elif value is None:
            out[key] = MISSING
        else:
            raise MalformedLocaleFile(path, f"value at '{where}' is {type(value).__name__}, expected string or object")
    return out


def parse_content(text: str, path: PathLike = "<string>") -> LocaleContent:
    try:
        data = json.loads(text)
    except ValueError as e:
        raise MalformedLocaleFile(path, f"invalid JSON ({e})") from e
    except RecursionError as e:
        raise MalformedLocaleFile(path, "nesting too deep") from e
    if not isinstance(data, dict):
        raise MalformedLocaleFile(path, f"top level is {type(data).__name__}, expected object")
    try:
        return _to_content(data, path)
    except RecursionError as e:
        raise MalformedLocaleFile(path, "nesting too deep") from e


def render_content(
    content: LocaleContent,
    space: Union[int, str] = 2,
    line_endings: LineEndings = LineEndings.LF,
    final_newline: bool = True,
) -> str:
    text = json.dumps(content.to_plain(), ensure_ascii=False, indent=space)
    if final_newline:
        text += "\n"
    if line_endings == LineEndings.CRLF:
        text = text.replace("\n", "\r\n")
    return text


def read_locale_file(path: PathLike) -> Tuple[str, LocaleContent]:
    try:
        # newline="" keeps CRLF intact so rewrites can be compared honestly
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise MalformedLocaleFile(path, f"not UTF-8 ({e.reason})") from e
    except OSError as e:
        raise LocaleSyncError(f"cannot read locale file: {e}", path=path) from e
    return text, parse_content(text, path)


def write_atomic(path: PathLike, text: str) -> None:
    """
    Write through a temp file in the target directory and move it into place,
    so a failed write never leaves a half-written locale file behind.
    """
    target = Path(path)
    tmp_name = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            newline="",
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        # temp files are created 0600
        if target.exists():
            shutil.copymode(target, tmp_name)
        else:
            os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, target)
        tmp_name = None
    except OSError as e:
        raise WriteFailure(target, e) from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
