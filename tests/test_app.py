import pytest

pytest.importorskip("flask")

import app as app_module
from config import CFG

MERGE_RESTRICTIONS = "0,0 1,0\n2,0 3,0\n0,1 1,1\n2,1 3,1\n1,2 2,2\n"


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(CFG, "SOLUTION_OUT", str(tmp_path / "solution.txt"))
    monkeypatch.setattr(CFG, "LAYOUT_HTML", str(tmp_path / "layout_view.html"))
    monkeypatch.setattr(CFG, "ENGINE", "backtrack")
    monkeypatch.setattr(CFG, "CROSS_CHECK", False)
    monkeypatch.setattr(app_module, "SOLUTION_DIR", str(tmp_path))
    monkeypatch.setattr(app_module, "SOLUTION_FILENAME", "solution.txt")
    monkeypatch.setattr(app_module, "LAYOUT_DIR", str(tmp_path))
    monkeypatch.setattr(app_module, "LAYOUT_FILENAME", "layout_view.html")
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as c:
        yield c


def test_solve_json_returns_pieces_and_drawings(client):
    resp = client.post("/solve", json={"width": 4, "height": 3, "restrictions": MERGE_RESTRICTIONS})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["ok"] is True
    assert [p["kind"] for p in data["pieces"]] == ["L", "O", "J"]
    assert data["pieces"][0]["cells"] == [[0, 0], [0, 1], [0, 2], [1, 2]]
    assert data["svg"].startswith("<svg")
    assert "┌" in data["text"]
    assert data["restrictions"] == MERGE_RESTRICTIONS
    assert data["summary"]["pieces"] == 3


def test_solve_accepts_form_fields_and_pair_lists(client):
    resp = client.post("/solve", data={"width": "2", "height": "2", "restrictions": ""})
    assert resp.get_json()["ok"] is True

    resp = client.post("/solve", json={"width": 2, "height": 2, "restrictions": [[[0, 0], [1, 0]]]})
    data = resp.get_json()
    assert resp.status_code == 200
    assert data["ok"] is False
    assert data["restrictions"] == "0,0 1,0\n"


def test_bad_restrictions_are_a_400(client):
    resp = client.post("/solve", json={"width": 3, "height": 3, "restrictions": "0,0 2,2"})
    assert resp.status_code == 400
    data = resp.get_json()
    assert data["ok"] is False
    assert data["reason"].startswith("Bad restrictions")


@pytest.mark.parametrize("payload", [{"width": "x", "height": 2}, {"width": 0, "height": 2}, {"height": 2}])
def test_bad_grid_is_a_400(client, payload):
    resp = client.post("/solve", json=payload)
    assert resp.status_code == 400
    assert resp.get_json()["reason"].startswith("Bad grid")


def test_progress_is_never_cached(client):
    client.post("/solve", json={"width": 2, "height": 2})
    resp = client.get("/progress")
    assert resp.status_code == 200
    assert resp.headers["Cache-Control"] == "no-store, max-age=0"
    snap = resp.get_json()
    assert snap["status"] == "Solved"
    assert snap["result_url"] == "/result/latest"


def test_latest_result_and_downloads(client):
    client.post("/solve", json={"width": 4, "height": 1})
    page = client.get("/result/latest")
    assert page.status_code == 200
    assert b"Solved" in page.data
    assert b"<svg" in page.data

    solution = client.get("/download/solution")
    assert solution.status_code == 200
    assert b"#0 I (0,0) (1,0) (2,0) (3,0)" in solution.data

    layout = client.get("/download/html")
    assert layout.status_code == 200
    assert b"Layout View" in layout.data


def test_index_serves_the_form(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert b"<form" in resp.data
