import pygame
import pytest

from app.state_manager import StateManager
from catalogs.bodies import builtin_bodies
from ui.screen_globe import GlobeScreen


class SwitchRecorder:

    def __init__(self):
        self.bodies = []

    def switch_config(self, body):
        self.bodies.append(body.identifier)


@pytest.fixture
def screen():
    pygame.display.init()
    sm = StateManager(builtin_bodies())
    gs = GlobeScreen(sm, enable_3d=False)
    gs.engine = SwitchRecorder()
    yield gs
    pygame.display.quit()


def _press(screen, key):
    return screen.handle_input([pygame.event.Event(pygame.KEYDOWN, key=key)])


def test_tab_cycles_bodies_and_wraps(screen):
    sm = screen.state_manager
    sm.select_point(sm.get_state().body.points[0])
    for _ in range(4):
        _press(screen, pygame.K_TAB)
    assert screen.engine.bodies == ["moon", "mars", "belt", "earth"]
    assert sm.get_state().body_index == 0
    assert sm.get_state().selected is None
    assert [b.state.active for b in screen.body_buttons] == [True, False, False, False]


def test_number_key_picks_body(screen):
    _press(screen, pygame.K_3)
    assert screen.engine.bodies == ["mars"]
    assert screen.body_buttons[2].state.active


def test_escape_quits(screen):
    assert _press(screen, pygame.K_ESCAPE) == 'QUIT'
