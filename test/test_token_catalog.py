"""
Tests for the token catalog and its lexical rules.
"""

import pytest

from strategyconditions.condition import Condition
from strategyconditions.config import Config
from strategyconditions.edit_session import EditSession, SessionKind
from strategyconditions.proposition_loader import PropositionLoadError
from strategyconditions.token_catalog import CatalogError, TokenCatalog
from strategyconditions.tokens import (
    CLOSE_PAREN,
    OPEN_PAREN,
    TRUE_TOKEN,
    OperatorKind,
    Token,
    TokenKind,
)


class TestShortcuts:
    """Test single-key operator shortcuts."""

    @pytest.mark.parametrize("key, kind", [
        ("a", OperatorKind.AND),
        ("o", OperatorKind.OR),
        ("n", OperatorKind.NOT),
        ("i", OperatorKind.IMPLIES),
        ("x", OperatorKind.XOR),
        ("e", OperatorKind.IFF),
    ])
    def test_default_shortcuts(self, catalog, key, kind):
        token = catalog.operator_for_shortcut(key)
        assert token == Token.for_operator(kind)
        assert token.kind is TokenKind.OPERATOR

    def test_unknown_shortcut(self, catalog):
        assert catalog.operator_for_shortcut("z") is None
        assert catalog.operator_for_shortcut("A") is None
        assert catalog.operator_for_shortcut("(") is None

    def test_custom_shortcut_table(self):
        catalog = TokenCatalog(["p"], shortcuts={"&": "and", "|": "or"})
        assert catalog.operator_for_shortcut("&") == Token.for_operator(OperatorKind.AND)
        assert catalog.operator_for_shortcut("a") is None

    @pytest.mark.parametrize("table, message", [
        ({"ab": "and"}, "single character"),
        ({"a": "nand"}, "unknown operator"),
        ({"(": "and"}, "reserved"),
        ({" ": "or"}, "reserved"),
    ])
    def test_invalid_shortcut_table(self, table, message):
        with pytest.raises(CatalogError, match=message):
            TokenCatalog(["p"], shortcuts=table)


class TestLookups:
    """Test proposition, parenthesis and operator lookups."""

    def test_proposition_exact_match(self, catalog):
        assert catalog.proposition_named("gear_down") == Token.proposition("gear_down")
        assert catalog.proposition_named("gear") is None
        assert catalog.proposition_named("P") is None

    def test_true_sentinel_always_known(self):
        catalog = TokenCatalog([])
        assert catalog.proposition_named("true") is TRUE_TOKEN
        assert "true" not in catalog.propositions

    def test_paren_tokens(self, catalog):
        assert catalog.paren_token("(") is OPEN_PAREN
        assert catalog.paren_token(")") is CLOSE_PAREN
        assert catalog.paren_token("[") is None

    def test_operator_keywords_and_symbols(self, catalog):
        assert catalog.operator_named("implies").operator is OperatorKind.IMPLIES
        assert catalog.operator_named("∧").operator is OperatorKind.AND
        assert catalog.operator_named("↔").operator is OperatorKind.IFF
        assert catalog.operator_named("nand") is None

    def test_propositions_keep_order(self):
        catalog = TokenCatalog(["z", "a", "m", "a"])
        assert catalog.propositions == ["z", "a", "m"]


class TestTokenize:
    """Test splitting text into tokens."""

    def test_canonical_text(self, catalog):
        tokens = catalog.tokenize("p and not q")
        assert [t.display for t in tokens] == ["p", " and ", "not ", "q"]

    def test_symbols_adjacent_to_names(self, catalog):
        tokens = catalog.tokenize("p∧(q∨¬r)")
        assert "".join(t.display for t in tokens) == "p and (q or not r)"

    def test_shortcut_letters_in_paste(self, catalog):
        tokens = catalog.tokenize("p a q")
        assert tokens[1].operator is OperatorKind.AND

    def test_proposition_wins_over_shortcut(self):
        catalog = TokenCatalog(["a", "b"])
        tokens = catalog.tokenize("a o b")
        assert tokens[0] == Token.proposition("a")
        assert tokens[1].operator is OperatorKind.OR

    def test_extra_whitespace_ignored(self, catalog):
        tokens = catalog.tokenize("  (p   iff q)\n")
        assert "".join(t.display for t in tokens) == "(p iff q)"

    def test_unknown_word_rejected(self, catalog):
        assert catalog.tokenize("p and zzz") is None

    def test_blank_text_rejected(self, catalog):
        assert catalog.tokenize("   ") is None
        assert catalog.tokenize("") is None


class TestFromConfig:
    """Test building a catalog from configuration."""

    def test_from_config_reads_propositions_path(self, propositions_file):
        config = Config({"propositions_path": str(propositions_file)})
        catalog = TokenCatalog.from_config(config)
        assert catalog.propositions == ["p", "q", "r", "gear_down"]

    def test_from_config_without_path(self):
        catalog = TokenCatalog.from_config(Config())
        assert catalog.propositions == []
        assert catalog.operator_for_shortcut("x").operator is OperatorKind.XOR

    def test_from_file(self, propositions_file):
        catalog = TokenCatalog.from_file(propositions_file)
        assert catalog.proposition_named("r") is not None


class TestKeywordNames:
    """Test that canonical text always re-reads as the same tokens."""

    def test_keyword_proposition_rejected(self):
        with pytest.raises(PropositionLoadError, match="operator keyword"):
            TokenCatalog(["p", "q", "and"])

    def test_committed_text_reopens_identically(self, catalog):
        session = EditSession(catalog, SessionKind.ADD_EDGE)
        session.focus_gained()
        session.add_proposition("p")
        session.type_text("a")
        session.add_proposition("q")
        committed = session.commit().condition

        reopened = Condition.from_text(committed.display_text(), catalog)
        assert reopened == committed
        assert [t.kind for t in reopened] == [
            TokenKind.PROPOSITION, TokenKind.OPERATOR, TokenKind.PROPOSITION,
        ]
