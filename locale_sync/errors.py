# locale_sync/errors.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

PathLike = Union[str, Path]


class LocaleSyncError(Exception):
    """
    Base class for failures raised while syncing locale files.
    Errors tied to a single file carry its path so the batch report can
    name the offending file.
    """

    def __init__(self, message: str, path: Optional[PathLike] = None):
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "path": self.path,
        }

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class UnknownLanguage(LocaleSyncError):
    def __init__(self, language_code: str, path: Optional[PathLike] = None):
        super().__init__(f"no plural rule for language '{language_code}'", path=path)
        self.language_code = language_code

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["language_code"] = self.language_code
        return out


class MalformedLocaleFile(LocaleSyncError):
    def __init__(self, path: PathLike, reason: str):
        super().__init__(f"malformed locale file: {reason}", path=path)
        self.reason = reason


class WriteFailure(LocaleSyncError):
    def __init__(self, path: PathLike, cause: OSError):
        super().__init__(f"failed to write locale file: {cause}", path=path)
        self.cause = cause


class MissingPrimaryFile(LocaleSyncError):
    def __init__(self, primary: str, path: Optional[PathLike] = None, reason: Optional[str] = None):
        super().__init__(reason or f"no '{primary}' file to take reference keys from", path=path)
        self.primary = primary
