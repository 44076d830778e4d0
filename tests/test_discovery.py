from __future__ import annotations

from services.discovery import discover_photos


def test_discover_photos_filters_by_extension(tmp_path) -> None:
    for name in ["b.JPG", "a.jpeg", "c.heic", "d.jxl", "notes.txt", "weatherhistory.csv", "e.png"]:
        (tmp_path / name).write_bytes(b"")
    (tmp_path / "nested").mkdir()
    (tmp_path / "nested" / "f.jpg").write_bytes(b"")
    (tmp_path / "folder.jpg").mkdir()

    photos = discover_photos(tmp_path)

    assert [path.name for path in photos] == ["a.jpeg", "b.JPG", "c.heic", "d.jxl"]


def test_discover_photos_in_empty_directory(tmp_path) -> None:
    assert discover_photos(tmp_path) == []


def test_discover_photos_custom_extensions(tmp_path) -> None:
    (tmp_path / "a.jpg").write_bytes(b"")
    (tmp_path / "b.tif").write_bytes(b"")

    assert [path.name for path in discover_photos(tmp_path, extensions=[".TIF"])] == ["b.tif"]
