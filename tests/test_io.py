import json

import numpy as np
import pytest

from kartline.io import load_points, load_track_record, save_track_record, write_points_csv


def test_load_points_csv_skips_header_and_comments(tmp_path):
    path = tmp_path / "track.csv"
    path.write_text("x,y\n# drawn by hand\n0,0\n10,5.5\n\n20,0\n", encoding="utf-8")
    assert load_points(str(path)) == [(0.0, 0.0), (10.0, 5.5), (20.0, 0.0)]


def test_load_points_json_variants(tmp_path):
    as_lists = tmp_path / "a.json"
    as_lists.write_text(json.dumps([[0, 0], [1, 2]]), encoding="utf-8")
    as_dicts = tmp_path / "b.json"
    as_dicts.write_text(json.dumps([{"x": 0, "y": 0}, {"x": 1, "y": 2}]), encoding="utf-8")
    record = tmp_path / "c.json"
    record.write_text(json.dumps({"trackPoints": [{"x": 0, "y": 0}, {"x": 1, "y": 2}]}), encoding="utf-8")
    for p in (as_lists, as_dicts, record):
        assert load_points(str(p)) == [(0.0, 0.0), (1.0, 2.0)]


def test_load_points_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_points(str(tmp_path / "missing.csv"))
    other = tmp_path / "track.txt"
    other.write_text("0 0\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_points(str(other))


def test_track_record_save_and_load(tmp_path):
    path = tmp_path / "session.json"
    track = [(0, 0), (10, 0), (10, 10)]
    racing = [(0, 1), (9, 1), (9, 10)]
    save_track_record(str(path), track, racing, lapTime=4.2)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["trackPoints"][1] == {"x": 10.0, "y": 0.0}
    assert data["lapTime"] == 4.2

    loaded_track, loaded_line = load_track_record(str(path))
    assert np.allclose(loaded_track, track)
    assert np.allclose(loaded_line, racing)


def test_track_record_without_line(tmp_path):
    path = tmp_path / "draft.json"
    save_track_record(str(path), [(0, 0), (1, 1), (2, 0)])
    _, line = load_track_record(str(path))
    assert line is None

    bad = tmp_path / "bad.json"
    bad.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_track_record(str(bad))


def test_write_points_csv(tmp_path):
    path = tmp_path / "line.csv"
    write_points_csv(str(path), [(0, 0), (1.5, 2)])
    assert load_points(str(path)) == [(0.0, 0.0), (1.5, 2.0)]
