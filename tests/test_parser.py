"""Tests for chglog.parser: subject-line classification and log record parsing."""

import pytest

from chglog.categories import EMPTY, GLOBAL
from chglog.parser import (
    FIELD_SEP,
    ClassifiedCommit,
    RawCommit,
    classify_commit,
    classify_commits,
    classify_subject,
    parse_log_output,
    parse_log_record,
)


@pytest.mark.parametrize(
    "line, expected",
    [
        ("feat(main): add CLI parsing", ("feat", "main", "add CLI parsing")),
        ("refactor: rename all functions", ("refactor", GLOBAL, "rename all functions")),
        ("docs(*): change section header fonts", ("docs", GLOBAL, "change section header fonts")),
        ("style(): alter commentary", ("style", GLOBAL, "alter commentary")),
        (
            "Initial commit - add .gitignore, README",
            (EMPTY, EMPTY, "Initial commit - add .gitignore, README"),
        ),
        ("oddtype: something", ("oddtype", GLOBAL, "something")),
    ],
)
def test_documented_examples(line, expected):
    assert classify_subject(line) == expected


def test_only_first_colon_splits():
    assert classify_subject("fix(api): handle a: b: c") == ("fix", "api", "handle a: b: c")


def test_subject_parentheses_do_not_affect_split():
    assert classify_subject("feat: support (optional) flags") == ("feat", GLOBAL, "support (optional) flags")


def test_interior_spacing_preserved():
    result = classify_subject("fix:   keep   the    spacing  ")
    assert result.subject_text == "keep   the    spacing"


def test_type_case_is_preserved():
    """Types are not normalized; heading lookup happens at render time."""
    assert classify_subject("Fix: broken build") == ("Fix", GLOBAL, "broken build")
    assert classify_subject("Feat(Core): thing") == ("Feat", "Core", "thing")


def test_recovery_with_spaces_around_preface():
    assert classify_subject("feat : spaced colon") == ("feat", GLOBAL, "spaced colon")


def test_recovery_scoped_wildcard_and_empty():
    assert classify_subject("Chore(*): bump") == ("Chore", GLOBAL, "bump")
    assert classify_subject("Chore(): bump") == ("Chore", GLOBAL, "bump")


def test_multi_word_preface_falls_back_to_whole_line():
    line = "Merge branch 'main': sync"
    assert classify_subject(line) == (EMPTY, EMPTY, line)


def test_multi_word_category_falls_back_to_whole_line():
    line = "fix(two words): x"
    assert classify_subject(line) == (EMPTY, EMPTY, line)


def test_colon_inside_category_is_not_top_level():
    assert classify_subject("fix(a:b): tidy") == ("fix", "a:b", "tidy")


def test_closing_paren_inside_category_falls_back():
    line = "fix(a)b): tidy"
    assert classify_subject(line) == (EMPTY, EMPTY, line)


def test_unbalanced_paren_before_colon_has_no_split():
    line = "fix(ui: broken layout"
    assert classify_subject(line) == (EMPTY, EMPTY, line)


def test_empty_preface_is_unstructured():
    assert classify_subject(": nothing") == (EMPTY, EMPTY, ": nothing")


@pytest.mark.parametrize("line", ["", "   ", ":", "()", "(:)", "a(b(c)d):e", "\x1f", "feat(", "):"])
def test_classification_is_total_and_idempotent(line):
    first = classify_subject(line)
    assert first == classify_subject(line)
    assert len(first) == 3


def test_classify_commit_carries_ids():
    raw = RawCommit(subject="perf(db): faster query", short_id="abc1234", long_id="abc1234def")
    assert classify_commit(raw) == ClassifiedCommit("perf", "db", "faster query", "abc1234", "abc1234def")


def test_malformed_record_is_always_plain_subject():
    raw = RawCommit(subject="feat: looks structured", short_id="", long_id="", malformed=True)
    result = classify_commit(raw)
    assert (result.type, result.category, result.subject_text) == (EMPTY, EMPTY, "feat: looks structured")


def test_parse_log_record():
    line = FIELD_SEP.join(["feat(main):  two  spaces", "abc1234", "abc1234ffff"]) + "\n"
    raw = parse_log_record(line)
    assert raw == RawCommit("feat(main):  two  spaces", "abc1234", "abc1234ffff")
    assert not raw.malformed


def test_parse_log_record_separator_in_subject():
    line = FIELD_SEP.join(["odd", "subject", "abc1234", "abc1234ffff"])
    raw = parse_log_record(line)
    assert raw.subject == f"odd{FIELD_SEP}subject"
    assert raw.short_id == "abc1234"


def test_parse_log_record_wrong_field_count():
    raw = parse_log_record("fix: no ids here")
    assert raw.malformed
    assert raw.subject == "fix: no ids here"
    assert classify_commit(raw).type == EMPTY


def test_parse_log_output_skips_blank_lines():
    output = "\n".join([
        FIELD_SEP.join(["fix: a", "1111111", "1111111aaaa"]),
        "",
        FIELD_SEP.join(["chore: b", "2222222", "2222222bbbb"]),
        "",
    ])
    raws = parse_log_output(output)
    assert [r.short_id for r in raws] == ["1111111", "2222222"]
    assert [c.type for c in classify_commits(raws)] == ["fix", "chore"]
