from models import PlacedPiece, SolveResult
from render import KIND_COLORS, render_result, render_text


def _two_bars():
    return SolveResult(
        ok=True,
        width=4,
        height=2,
        engine="backtrack",
        pieces=[
            PlacedPiece(0, "I", ((0, 0), (1, 0), (2, 0), (3, 0))),
            PlacedPiece(1, "I", ((0, 1), (1, 1), (2, 1), (3, 1))),
        ],
    )


def test_render_text_draws_borders_between_pieces():
    lines = render_text(_two_bars()).splitlines()
    assert len(lines) == 5
    assert lines[0].startswith("┌") and lines[0].endswith("┐")
    assert lines[2] == "├" + "─" * 19 + "┤"
    assert lines[4].startswith("└") and lines[4].endswith("┘")
    assert "0" in lines[1] and "1" in lines[3]
    # no inner verticals inside a horizontal bar
    assert lines[1].count("│") == 2


def test_render_text_single_piece_has_no_inner_lines():
    result = SolveResult(
        ok=True,
        width=2,
        height=2,
        engine="backtrack",
        pieces=[PlacedPiece(0, "O", ((0, 0), (1, 0), (0, 1), (1, 1)))],
    )
    text = render_text(result)
    assert "┼" not in text
    assert "├" not in text


def test_render_result_colours_by_kind():
    result = SolveResult(
        ok=True,
        width=4,
        height=3,
        engine="backtrack",
        pieces=[
            PlacedPiece(0, "L", ((0, 0), (0, 1), (0, 2), (1, 2))),
            PlacedPiece(1, "O", ((1, 0), (2, 0), (1, 1), (2, 1))),
            PlacedPiece(2, "J", ((3, 0), (3, 1), (2, 2), (3, 2))),
        ],
    )
    svg, legend = render_result(result, scale=20)
    assert svg.startswith("<svg")
    assert 'width="82"' in svg
    for kind in ("L", "O", "J"):
        assert KIND_COLORS[kind] in svg
        assert f">{kind}</li>" in legend
    assert ">1 O</text>" in svg
    assert "T</li>" not in legend
