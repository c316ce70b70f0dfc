"""Create a new sketch directory from the bundled template."""
from __future__ import annotations

import re
from importlib import resources
from pathlib import Path

TEMPLATE_NAME = "basic_sketch.py.tmpl"
SKETCHES_DIRNAME = "sketches"
INDEX_FILENAME = "index.md"
INDEX_MARKER = "<!-- new sketches are added here -->"

_TITLE_LINE = re.compile(r'^TITLE = ".*"$', re.MULTILINE)


def read_template() -> str:
    return resources.files("simlab.templates").joinpath(TEMPLATE_NAME).read_text(encoding="utf-8")


def render_template(name: str, template: str | None = None) -> str:
    template = read_template() if template is None else template
    title = f"{name} - Simulation Lab".replace("\\", "\\\\").replace('"', '\\"')
    return _TITLE_LINE.sub(lambda _: f'TITLE = "{title}"', template, count=1)


def add_index_link(index_path: Path, name: str) -> bool:
    """Insert a link before the marker comment; ``False`` when there is no marker."""

    text = index_path.read_text(encoding="utf-8")
    if INDEX_MARKER not in text:
        return False
    link = f"- [{name}]({SKETCHES_DIRNAME}/{name}/)\n"
    index_path.write_text(text.replace(INDEX_MARKER, link + INDEX_MARKER, 1), encoding="utf-8")
    return True


def create_sketch(name: str, root: Path = Path(".")) -> Path:
    """Scaffold ``root/sketches/NAME/sketch.py`` and return its directory.

    Raises :class:`FileExistsError` when the directory is already there and
    :class:`ValueError` for names that are not a single path component.
    """

    if not name or name in {".", ".."} or "/" in name or "\\" in name:
        raise ValueError(f"Invalid sketch name {name!r}")
    target = root / SKETCHES_DIRNAME / name
    if target.exists():
        raise FileExistsError(f"Sketch '{name}' already exists at {target}")

    target.mkdir(parents=True)
    (target / "sketch.py").write_text(render_template(name), encoding="utf-8")

    index_path = root / INDEX_FILENAME
    if index_path.is_file():
        add_index_link(index_path, name)
    return target


def find_sketches(root: Path = Path(".")) -> list[Path]:
    """Scaffolded sketch directories under ``root/sketches``, sorted by name."""

    sketches_dir = root / SKETCHES_DIRNAME
    if not sketches_dir.is_dir():
        return []
    return sorted(path.parent for path in sketches_dir.glob("*/sketch.py"))


__all__ = ["INDEX_MARKER", "add_index_link", "create_sketch", "find_sketches", "render_template"]
