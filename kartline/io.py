import csv
import json
import os
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .geometry import Point, as_points, to_dicts, to_xy


def load_points(file_path: str) -> List[Point]:
    """Load track points from CSV or JSON.

    CSV: rows as x,y (lines starting with # are skipped)
    JSON: list of [x,y], list of {"x":..,"y":..}, or a track record whose
    ``trackPoints`` holds the points
    """
    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"Points file not found: {file_path}")
    _, ext = os.path.splitext(file_path.lower())
    if ext == ".csv":
        points: List[Point] = []
        with open(file_path, "r", encoding="utf-8") as f:
            reader = csv.reader(f)
            for row in reader:
                if not row or row[0].strip().startswith("#"):
                    continue
                if len(row) < 2:
                    continue
                try:
                    points.append((float(row[0]), float(row[1])))
                except ValueError:
                    # header row
                    continue
        return points
    if ext == ".json":
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("trackPoints") or []
        return [to_xy(item) for item in data]
    raise ValueError(f"Unsupported file type: {ext}")


def load_track_record(file_path: str) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """Read a saved ``{"trackPoints": [...], "racingLine": [...]}`` record."""
    with open(file_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict) or "trackPoints" not in data:
        raise ValueError(f"Not a track record: {file_path}")
    racing = data.get("racingLine")
    return as_points(data["trackPoints"]), (as_points(racing) if racing else None)


def save_track_record(file_path: str, track_points: Iterable, racing_line: Optional[Iterable] = None,
                      **extra) -> None:
    record = {
        "trackPoints": to_dicts(as_points(track_points)),
        "racingLine": to_dicts(as_points(racing_line)) if racing_line is not None else None,
    }
    record.update(extra)
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(record, f, ensure_ascii=False, indent=2)


def write_points_csv(file_path: str, points: Iterable) -> None:
    with open(file_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["x", "y"])
        for x, y in as_points(points):
            writer.writerow([float(x), float(y)])
