import pytest

from restrictions import (
    RestrictionParseError,
    Restrictions,
    format_restrictions,
    load_restrictions,
    parse_restrictions,
)


def test_pairs_are_symmetric():
    r = Restrictions([((1, 0), (0, 0))])
    assert r.is_restricted((0, 0), (1, 0))
    assert r.is_restricted((1, 0), (0, 0))
    assert not r.is_restricted((0, 0), (0, 1))
    assert r.partners((0, 0)) == {(1, 0)}
    assert r.pairs() == [((0, 0), (1, 0))]
    assert len(r) == 1
    assert r


def test_empty_relation_is_falsy():
    assert not Restrictions()
    assert len(Restrictions()) == 0


def test_parse_skips_comments_and_blank_lines():
    text = """
# top row
0,0 1,0
  2, 0   3,0   # trailing comment

1,1 1,2
"""
    r = parse_restrictions(text, 4, 3)
    assert r.pairs() == [((0, 0), (1, 0)), ((2, 0), (3, 0)), ((1, 1), (1, 2))]


def test_duplicate_and_reversed_lines_collapse():
    r = parse_restrictions("0,0 1,0\n1,0 0,0\n", 2, 2)
    assert len(r) == 1


@pytest.mark.parametrize(
    "line,problem",
    [
        ("0,0 1", "expected"),
        ("a,b c,d", "expected"),
        ("0,0 0,5", "outside"),
        ("-1,0 0,0", "outside"),
        ("0,0 1,1", "not adjacent"),
        ("0,0 0,0", "not adjacent"),
    ],
)
def test_parse_errors_name_the_line(line, problem):
    with pytest.raises(RestrictionParseError) as excinfo:
        parse_restrictions("0,0 1,0\n" + line, 3, 3)
    assert excinfo.value.line_no == 2
    assert problem in excinfo.value.problem
    assert isinstance(excinfo.value, ValueError)


def test_format_writes_one_line_per_pair():
    r = Restrictions([((1, 1), (1, 0)), ((0, 0), (1, 0))])
    assert format_restrictions(r) == "0,0 1,0\n1,0 1,1\n"
    assert parse_restrictions(format_restrictions(r), 2, 2).pairs() == r.pairs()


def test_load_restrictions_reads_a_file(tmp_path):
    path = tmp_path / "restrictions.txt"
    path.write_text("0,0 0,1\n", encoding="utf-8")
    r = load_restrictions(str(path), 2, 2)
    assert r.is_restricted((0, 1), (0, 0))


def test_load_restrictions_reports_undecodable_line(tmp_path):
    path = tmp_path / "restrictions.txt"
    path.write_bytes(b"0,0 1,0\n\xff\xfe\n")
    with pytest.raises(RestrictionParseError) as excinfo:
        load_restrictions(str(path), 2, 2)
    assert excinfo.value.line_no == 2
    assert excinfo.value.problem == "not valid UTF-8"
