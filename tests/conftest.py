import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame
import pytest

from simlab.render.assets import load_font


@pytest.fixture(autouse=True)
def pygame_modules():
    # the CLI thumbnail path calls pygame.quit(), so re-init per test
    pygame.display.init()
    pygame.font.init()
    yield


@pytest.fixture
def surface():
    return pygame.Surface((400, 300))


@pytest.fixture
def font():
    return load_font(("DejaVu Sans",), 12)


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / "settings.json"
