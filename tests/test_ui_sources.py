# tests/test_ui_sources.py
from pathlib import Path

UI_DIR = Path(__file__).resolve().parent.parent / "ui"


def test_views_use_width_instead_of_container_width():
    offenders = [
        str(path.relative_to(UI_DIR))
        for path in UI_DIR.rglob("*.py")
        if "use_container_width" in path.read_text(encoding="utf-8")
    ]
    assert offenders == []
