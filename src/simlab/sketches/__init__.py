"""Built-in sketches and loading of scaffolded ones."""
from __future__ import annotations

import importlib.util
import sys
from pathlib import Path

from .base import Sketch
from .gravity import GravitySketch
from .rotating_pendulum import RotatingPendulumSketch

SKETCHES: dict[str, type[Sketch]] = {
    GravitySketch.slug: GravitySketch,
    RotatingPendulumSketch.slug: RotatingPendulumSketch,
}


def load_sketch_file(path: str | Path) -> type[Sketch]:
    """Import a sketch module from disk and return its ``SKETCH`` class."""

    path = Path(path)
    if path.is_dir():
        path = path / "sketch.py"
    if not path.is_file():
        raise FileNotFoundError(f"No sketch file at {path}")
    module_name = f"simlab_user_sketch_{path.parent.name.replace('-', '_')}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot import sketch from {path}")
    module = importlib.util.module_from_spec(spec)
    # dataclasses resolve string annotations through sys.modules
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    sketch_cls = getattr(module, "SKETCH", None)
    if not (isinstance(sketch_cls, type) and issubclass(sketch_cls, Sketch)):
        raise ImportError(f"{path} does not define SKETCH as a Sketch subclass")
    return sketch_cls


def resolve_sketch(name: str) -> type[Sketch]:
    """Built-in slug, or a path to a sketch file/directory."""

    if name in SKETCHES:
        return SKETCHES[name]
    candidate = Path(name)
    if candidate.exists():
        return load_sketch_file(candidate)
    raise KeyError(name)


__all__ = [
    "GravitySketch",
    "RotatingPendulumSketch",
    "SKETCHES",
    "Sketch",
    "load_sketch_file",
    "resolve_sketch",
]
