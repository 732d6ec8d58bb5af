from pathlib import Path

from crossname.refactor.operations.transforms import OccurrenceRewriter, split_lines
from crossname.spec import CaptureKind, Occurrence, SourceLocation

FILE = Path("mod.py")


def _occ(line, column, text="foo", kind=CaptureKind.REFERENCE):
    return Occurrence(kind, SourceLocation(FILE, line, column), text)


def test_split_lines_keeps_terminators():
    assert split_lines("a\nb\r\nc\rd") == ["a\n", "b\r\n", "c\r", "d"]
    assert split_lines("") == []
    assert split_lines("a\n") == ["a\n"]


def test_only_given_positions_change():
    source = 'foo("foo") + foo  # foo\n'

    result = OccurrenceRewriter("foo", "bar").rewrite(source, [_occ(1, 0), _occ(1, 13)])

    assert result.source == 'bar("foo") + bar  # foo\n'
    assert len(result.applied) == 2
    assert result.dropped == []


def test_line_endings_are_preserved():
    source = "foo = 1\r\nprint(foo)\r\nother\r\n"

    result = OccurrenceRewriter("foo", "renamed").rewrite(source, [_occ(1, 0), _occ(2, 6)])

    assert result.source == "renamed = 1\r\nprint(renamed)\r\nother\r\n"


def test_edits_report_before_and_after():
    source = "x = 1\nfoo(x)\n"

    result = OccurrenceRewriter("foo", "bar").rewrite(source, [_occ(2, 0)])

    assert [(e.line, e.before, e.after) for e in result.edits] == [(2, "foo(x)", "bar(x)")]


def test_character_columns_on_non_ascii_lines():
    source = 's = "€"; a(a)\n'

    result = OccurrenceRewriter("a", "b").rewrite(
        source, [_occ(1, 9, "a"), _occ(1, 11, "a")]
    )

    assert result.source == 's = "€"; b(b)\n'
    assert len(result.applied) == 2
    assert result.dropped == []


def test_byte_columns_are_not_guessed():
    # Byte column 11 is character column 9 here, but the rewriter takes it as is.
    source = 's = "€"; a(a)\n'

    result = OccurrenceRewriter("a", "b").rewrite(source, [_occ(1, 11, "a")])

    assert result.source == 's = "€"; a(b)\n'


def test_stale_occurrences_are_dropped():
    source = "foobar = 1\nbaz = 2\n"

    result = OccurrenceRewriter("foo", "qux").rewrite(
        source, [_occ(1, 0), _occ(2, 0), _occ(9, 0)]
    )

    assert result.source == source
    assert result.applied == []
    assert len(result.dropped) == 3


def test_duplicate_positions_are_applied_once():
    result = OccurrenceRewriter("foo", "bar").rewrite("foo\n", [_occ(1, 0), _occ(1, 0)])

    assert result.source == "bar\n"
    assert len(result.applied) == 1


def test_longer_and_shorter_names_on_one_line():
    source = "ab(ab, ab)\n"
    occurrences = [_occ(1, 0, "ab"), _occ(1, 3, "ab"), _occ(1, 7, "ab")]

    longer = OccurrenceRewriter("ab", "abcdef").rewrite(source, occurrences)
    shorter = OccurrenceRewriter("ab", "z").rewrite(source, occurrences)

    assert longer.source == "abcdef(abcdef, abcdef)\n"
    assert shorter.source == "z(z, z)\n"
