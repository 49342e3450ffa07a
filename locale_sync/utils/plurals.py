from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

from pydantic import BaseModel, ConfigDict

from ..errors import UnknownLanguage


class Convention(str, Enum):
    SINGLE = "single"
    SINGULAR_PLURAL = "singular_plural"
    NUMBERED = "numbered"


class PluralRule(BaseModel):
    """
    Ordered plural-form suffixes for one language, tagged with the suffixing
    convention they follow. A base key expands to ``base + suffix`` per form.
    """
    model_config = ConfigDict(frozen=True)

    convention: Convention
    suffixes: Tuple[str, ...]

    @property
    def nforms(self) -> int:
        return len(self.suffixes)

    def expand(self, base: str) -> Tuple[str, ...]:
        return tuple(base + s for s in self.suffixes)


SINGLE = PluralRule(convention=Convention.SINGLE, suffixes=("",))
SINGULAR_PLURAL = PluralRule(convention=Convention.SINGULAR_PLURAL, suffixes=("", "_plural"))


def _numbered(n: int) -> PluralRule:
    return PluralRule(convention=Convention.NUMBERED, suffixes=tuple(f"_{i}" for i in range(n)))


# Used when a language is missing from the table and the caller opted into
# the fallback policy.
DEFAULT_RULE = SINGULAR_PLURAL

# Curated from the i18next plural-forms reference table. Single-form
# languages keep the key bare.
_PLURAL_DATA: Dict[str, PluralRule] = {
    "ach": SINGULAR_PLURAL,
    "af": SINGULAR_PLURAL,
    "ak": SINGULAR_PLURAL,
    "am": SINGULAR_PLURAL,
    "an": SINGULAR_PLURAL,
    "ar": _numbered(6),
    "arn": SINGULAR_PLURAL,
    "ast": SINGULAR_PLURAL,
    "ay": SINGLE,
    "az": SINGULAR_PLURAL,
    "be": _numbered(3),
    "bg": SINGULAR_PLURAL,
    "bn": SINGULAR_PLURAL,
    "bo": SINGLE,
    "br": SINGULAR_PLURAL,
    "bs": _numbered(3),
    "ca": SINGULAR_PLURAL,
    "cgg": SINGLE,
    "cs": _numbered(3),
    "csb": _numbered(3),
    "cy": _numbered(4),
    "da": SINGULAR_PLURAL,
    "de": SINGULAR_PLURAL,
    "dev": SINGULAR_PLURAL,
    "dz": _numbered(3),
    "el": SINGULAR_PLURAL,
    "en": SINGULAR_PLURAL,
    "eo": SINGULAR_PLURAL,
    "es": SINGULAR_PLURAL,
    "es_ar": SINGULAR_PLURAL,
    "et": SINGULAR_PLURAL,
    "eu": SINGULAR_PLURAL,
    "fa": SINGLE,
    "fi": SINGULAR_PLURAL,
    "fil": SINGULAR_PLURAL,
    "fo": SINGULAR_PLURAL,
    "fr": SINGULAR_PLURAL,
    "fur": SINGULAR_PLURAL,
    "fy": SINGULAR_PLURAL,
    "ga": _numbered(5),
    "gd": _numbered(4),
    "gl": SINGULAR_PLURAL,
    "gu": SINGULAR_PLURAL,
    "gun": SINGULAR_PLURAL,
    "ha": SINGULAR_PLURAL,
    "he": SINGULAR_PLURAL,
    "hi": SINGULAR_PLURAL,
    "hr": _numbered(3),
    "hu": SINGULAR_PLURAL,
    "hy": SINGULAR_PLURAL,
    "ia": SINGULAR_PLURAL,
    "id": SINGLE,
    "is": SINGULAR_PLURAL,
    "it": SINGULAR_PLURAL,
    "ja": SINGLE,
    "jbo": SINGLE,
    "jv": SINGULAR_PLURAL,
    "ka": SINGLE,
    "kk": SINGLE,
    "km": SINGLE,
    "kn": SINGULAR_PLURAL,
    "ko": SINGLE,
    "ku": SINGULAR_PLURAL,
    "kw": _numbered(4),
    "ky": SINGLE,
    "lb": SINGULAR_PLURAL,
    "ln": SINGULAR_PLURAL,
    "lo": SINGLE,
    "lt": _numbered(3),
    "lv": _numbered(3),
    "mai": SINGULAR_PLURAL,
    "mfe": SINGULAR_PLURAL,
    "mg": SINGULAR_PLURAL,
    "mi": SINGULAR_PLURAL,
    "mk": SINGULAR_PLURAL,
    "ml": SINGULAR_PLURAL,
    "mn": SINGULAR_PLURAL,
    "mnk": _numbered(3),
    "mr": SINGULAR_PLURAL,
    "ms": SINGLE,
    "mt": _numbered(4),
    "nah": SINGULAR_PLURAL,
    "nap": SINGULAR_PLURAL,
    "nb": SINGULAR_PLURAL,
    "ne": SINGULAR_PLURAL,
    "nl": SINGULAR_PLURAL,
    "nn": SINGULAR_PLURAL,
    "no": SINGULAR_PLURAL,
    "nso": SINGULAR_PLURAL,
    "oc": SINGULAR_PLURAL,
    "or": SINGULAR_PLURAL,
    "pa": SINGULAR_PLURAL,
    "pap": SINGULAR_PLURAL,
    "pl": _numbered(3),
    "pms": SINGULAR_PLURAL,
    "ps": SINGULAR_PLURAL,
    "pt": SINGULAR_PLURAL,
    "pt_br": SINGULAR_PLURAL,
    "rm": SINGULAR_PLURAL,
    "ro": _numbered(3),
    "ru": _numbered(3),
    "sah": SINGLE,
    "sco": SINGULAR_PLURAL,
    "se": SINGULAR_PLURAL,
    "si": SINGULAR_PLURAL,
    "sk": _numbered(3),
    "sl": _numbered(4),
    "so": SINGULAR_PLURAL,
    "son": SINGULAR_PLURAL,
    "sq": SINGULAR_PLURAL,
    "sr": _numbered(3),
    "su": SINGLE,
    "sv": SINGULAR_PLURAL,
    "sw": SINGULAR_PLURAL,
    "ta": SINGULAR_PLURAL,
    "te": SINGULAR_PLURAL,
    "tg": SINGULAR_PLURAL,
    "th": SINGLE,
    "ti": SINGULAR_PLURAL,
    "tk": SINGULAR_PLURAL,
    "tr": SINGULAR_PLURAL,
    "tt": SINGLE,
    "ug": SINGLE,
    "uk": _numbered(3),
    "ur": SINGULAR_PLURAL,
    "uz": SINGULAR_PLURAL,
    "vi": SINGLE,
    "wa": SINGULAR_PLURAL,
    "wo": SINGLE,
    "yo": SINGULAR_PLURAL,
    "zh": SINGLE,
}

PLURAL_RULES: Mapping[str, PluralRule] = MappingProxyType(_PLURAL_DATA)


def normalize_language(code: str) -> str:
    return (code or "").strip().replace("-", "_").lower()


def rule_for(language_code: str) -> PluralRule:
    norm = normalize_language(language_code)
    rule = PLURAL_RULES.get(norm) or PLURAL_RULES.get(norm.split("_")[0])
    if rule is None:
        raise UnknownLanguage(language_code)
    return rule


def forms_for(language_code: str) -> Tuple[str, ...]:
    return rule_for(language_code).suffixes


def is_known_language(code: str) -> bool:
    try:
        rule_for(code)
    except UnknownLanguage:
        return False
    return True

