"""
Tests for the command-line interface.
"""

import pytest

from strategyconditions.cli import EXIT_LOAD_ERROR, EXIT_OK, EXIT_REJECTED, main


def test_check_accepts(propositions_file, capsys):
    code = main(["--propositions", str(propositions_file), "check", "p and q or r", "--tree"])
    out = capsys.readouterr().out
    assert code == EXIT_OK
    assert "Accepted: p and q or r" in out
    assert "((p and q) or r)" in out


def test_check_rejects_grammar(propositions_file, capsys):
    code = main(["--propositions", str(propositions_file), "check", "p and"])
    assert code == EXIT_REJECTED
    assert "The Condition is not valid." in capsys.readouterr().out


def test_check_rejects_unknown_word(propositions_file, capsys):
    code = main(["--propositions", str(propositions_file), "check", "p and s"])
    assert code == EXIT_REJECTED
    assert "cannot be tokenized" in capsys.readouterr().out


def test_tokens_listing(propositions_file, capsys):
    code = main(["--propositions", str(propositions_file), "tokens", "not (p or q)"])
    lines = capsys.readouterr().out.splitlines()
    assert code == EXIT_OK
    assert len(lines) == 6
    assert "'not '" in lines[0]
    assert lines[3].split()[1] == "6"


def test_missing_propositions_file(tmp_path, capsys):
    code = main(["--propositions", str(tmp_path / "none.txt"), "check", "p"])
    assert code == EXIT_LOAD_ERROR
    assert "not found" in capsys.readouterr().err


def test_config_file_precedence(tmp_path, propositions_file, capsys):
    config_path = tmp_path / "config.json"
    config_path.write_text('{"operator_precedence": ["and", "xor", "or", "implies", "iff"]}', encoding="utf-8")
    code = main([
        "--propositions", str(propositions_file),
        "--config", str(config_path),
        "check", "p and q or r", "--tree",
    ])
    assert code == EXIT_OK
    assert "(p and (q or r))" in capsys.readouterr().out


def test_requires_command():
    with pytest.raises(SystemExit):
        main([])
