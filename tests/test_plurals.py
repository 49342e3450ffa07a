"""
Unit tests for the plural-rule table.
"""

import pytest

from locale_sync.errors import UnknownLanguage
from locale_sync.utils.plurals import (
    DEFAULT_RULE,
    PLURAL_RULES,
    Convention,
    PluralRule,
    forms_for,
    is_known_language,
    normalize_language,
    rule_for,
)


class TestLookup:
    """Language code -> suffixes."""

    def test_two_form_language(self):
        assert forms_for("en") == ("", "_plural")
        assert rule_for("en").convention == Convention.SINGULAR_PLURAL

    def test_single_form_language_stays_bare(self):
        assert forms_for("ja") == ("",)
        assert rule_for("ja").convention == Convention.SINGLE

    @pytest.mark.parametrize("code,count", [("ru", 3), ("sl", 4), ("ga", 5), ("ar", 6)])
    def test_numbered_languages(self, code, count):
        rule = rule_for(code)
        assert rule.convention == Convention.NUMBERED
        assert rule.suffixes == tuple(f"_{i}" for i in range(count))

    def test_regional_variant_has_its_own_entry(self):
        assert forms_for("pt-BR") == ("", "_plural")
        assert "pt_br" in PLURAL_RULES

    def test_regional_variant_falls_back_to_base_language(self):
        assert forms_for("de_AT") == forms_for("de")
        assert forms_for("ru-RU") == ("_0", "_1", "_2")

    def test_unknown_language_raises(self):
        with pytest.raises(UnknownLanguage) as exc:
            forms_for("xx")
        assert exc.value.language_code == "xx"
        assert not is_known_language("xx")
        assert is_known_language("en")

    def test_normalize_language(self):
        assert normalize_language("pt-BR") == "pt_br"
        assert normalize_language(" es_AR ") == "es_ar"
        assert normalize_language(None) == ""


class TestTableData:
    """Shape of the curated dataset."""

    def test_every_entry_has_one_to_six_forms(self):
        for code, rule in PLURAL_RULES.items():
            assert 1 <= rule.nforms <= 6, code

    def test_conventions_match_suffixes(self):
        for code, rule in PLURAL_RULES.items():
            if rule.convention == Convention.SINGLE:
                assert rule.suffixes == ("",), code
            elif rule.convention == Convention.SINGULAR_PLURAL:
                assert rule.suffixes == ("", "_plural"), code
            else:
                assert rule.nforms >= 3, code

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            PLURAL_RULES["xx"] = DEFAULT_RULE  # type: ignore[index]

    def test_rules_are_frozen(self):
        with pytest.raises(Exception):
            rule_for("en").suffixes = ("",)  # type: ignore[misc]

    def test_default_rule_is_two_forms(self):
        assert DEFAULT_RULE.suffixes == ("", "_plural")

    def test_expand(self):
        assert rule_for("en").expand("apple") == ("apple", "apple_plural")
        assert PluralRule(convention=Convention.NUMBERED, suffixes=("_0", "_1", "_2")).expand("x") == (
            "x_0", "x_1", "x_2",
        )

