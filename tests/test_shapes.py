from collections import Counter

import pytest

from solver.errors import InvariantViolation
from solver.piece import piece_from_coords
from solver.shapes import ShapeKind, classify

_STEPS = ((1, 0), (-1, 0), (0, 1), (0, -1))


def _normalize(cells):
    ordered = sorted(cells, key=lambda c: (c[1], c[0]))
    ox, oy = ordered[0]
    return tuple((x - ox, y - oy) for x, y in ordered)


def _fixed_tetrominoes():
    shapes = {((0, 0),)}
    for _ in range(3):
        grown = set()
        for shape in shapes:
            for x, y in shape:
                for dx, dy in _STEPS:
                    n = (x + dx, y + dy)
                    if n not in shape:
                        grown.add(_normalize(shape + (n,)))
        shapes = grown
    return shapes


@pytest.mark.parametrize(
    "kind,count",
    [
        (ShapeKind.T, 4),
        (ShapeKind.L, 4),
        (ShapeKind.J, 4),
        (ShapeKind.S, 2),
        (ShapeKind.Z, 2),
        (ShapeKind.I, 2),
        (ShapeKind.O, 1),
    ],
)
def test_rotation_counts(kind, count):
    assert len(kind.placements) == count
    assert len(set(kind.placements)) == count


def test_i_has_one_vertical_and_one_horizontal_placement():
    assert set(ShapeKind.I.placements) == {
        ((0, 0), (0, 1), (0, 2), (0, 3)),
        ((0, 0), (1, 0), (2, 0), (3, 0)),
    }


def test_every_fixed_tetromino_has_exactly_one_kind():
    shapes = _fixed_tetrominoes()
    assert len(shapes) == 19

    seen = Counter()
    for cells in shapes:
        piece = piece_from_coords(cells)
        matching = [k for k in ShapeKind if k.matches(piece)]
        assert len(matching) == 1, cells
        seen[matching[0]] += 1

    assert seen == Counter({k: len(k.placements) for k in ShapeKind})


def test_classify_ignores_position():
    near = piece_from_coords([(0, 0), (1, 0), (1, 1), (2, 1)])
    far = piece_from_coords([(7, 3), (8, 3), (8, 4), (9, 4)])
    assert classify(near) is ShapeKind.Z
    assert classify(far) is ShapeKind.Z
    assert classify(far) is classify(far)


def test_mirror_images_are_different_kinds():
    l_piece = piece_from_coords([(0, 0), (0, 1), (0, 2), (1, 2)])
    j_piece = piece_from_coords([(1, 0), (1, 1), (1, 2), (0, 2)])
    assert classify(l_piece) is ShapeKind.L
    assert classify(j_piece) is ShapeKind.J


def test_shape_property_classifies_complete_piece():
    piece = piece_from_coords([(0, 0), (1, 0), (0, 1), (1, 1)])
    assert piece.shape is ShapeKind.O


def test_classify_rejects_incomplete_and_disconnected_pieces():
    with pytest.raises(InvariantViolation):
        classify(piece_from_coords([(0, 0), (1, 0), (2, 0)]))
    with pytest.raises(InvariantViolation):
        classify(piece_from_coords([(0, 0), (2, 0), (4, 0), (6, 0)]))
