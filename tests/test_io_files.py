import os
import tempfile
import unittest

from config import CFG
from io_files import write_layout_view_html, write_solution
from models import PlacedPiece, SolveResult


class WriteOutputsTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self._orig_solution = CFG.SOLUTION_OUT
        self._orig_layout = CFG.LAYOUT_HTML

    def tearDown(self) -> None:
        CFG.SOLUTION_OUT = self._orig_solution
        CFG.LAYOUT_HTML = self._orig_layout

    def test_write_solution_uses_configured_relative_path(self) -> None:
        CFG.SOLUTION_OUT = "outputs/custom_solution.txt"
        result = SolveResult(
            ok=True,
            width=2,
            height=2,
            engine="backtrack",
            pieces=[PlacedPiece(0, "O", ((0, 0), (1, 0), (0, 1), (1, 1)))],
        )

        path = write_solution(result, self.tmpdir.name)

        expected = os.path.join(self.tmpdir.name, "outputs", "custom_solution.txt")
        self.assertEqual(path, expected)
        with open(path, "r", encoding="utf-8") as fh:
            lines = fh.read().splitlines()
        self.assertEqual(lines[0], "# grid 2x2 engine=backtrack")
        self.assertEqual(lines[1], "#0 O (0,0) (1,0) (0,1) (1,1)")

    def test_write_solution_records_failure_reason(self) -> None:
        CFG.SOLUTION_OUT = "solution.txt"
        result = SolveResult(ok=False, width=3, height=2, engine="cp-sat", reason="No tiling satisfies the constraints")

        path = write_solution(result, self.tmpdir.name)

        with open(path, "r", encoding="utf-8") as fh:
            contents = fh.read()
        self.assertIn("No solution\n", contents)
        self.assertIn("# No tiling satisfies the constraints", contents)

    def test_write_layout_view_html_accepts_absolute_path(self) -> None:
        target = os.path.join(self.tmpdir.name, "html", "layout.html")
        CFG.LAYOUT_HTML = target

        svg = "<svg></svg>"
        legend = "<li>O</li>"

        path = write_layout_view_html(svg, legend, self.tmpdir.name, grid_label="2 × 2")

        self.assertEqual(path, target)
        with open(path, "r", encoding="utf-8") as fh:
            contents = fh.read()
        self.assertIn(svg, contents)
        self.assertIn(legend, contents)
        self.assertIn("2 × 2", contents)


if __name__ == "__main__":
    unittest.main()
