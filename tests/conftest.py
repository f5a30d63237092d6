"""Shared test fixtures."""

import pytest

from load_timer.domain import EDGE_END, EDGE_START, load_item_id
from load_timer.session import SessionModel


class FakePlayer:
    def __init__(self, t=0.0):
        self.t = t
        self.playing = False
        self.seeks = []

    def get_current_time(self):
        return self.t

    def seek_to(self, seconds, allow_seek_ahead=True):
        self.seeks.append(seconds)
        self.t = seconds

    def play(self):
        self.playing = True

    def pause(self):
        self.playing = False

    def is_playing(self):
        return self.playing


def add_marked_load(session, start, end):
    ld = session.add_load()
    session.mark_time(load_item_id(ld.id), EDGE_START, start)
    session.mark_time(load_item_id(ld.id), EDGE_END, end)
    return session.get_load(ld.id)


@pytest.fixture
def session():
    return SessionModel(fps=30)


@pytest.fixture
def run_session(session):
    """Session with run [0, 10] and loads [1, 3], [3, 5]."""
    session.set_run_marker(EDGE_START, time=0.0)
    session.set_run_marker(EDGE_END, time=10.0)
    add_marked_load(session, 1.0, 3.0)
    add_marked_load(session, 3.0, 5.0)
    return session


@pytest.fixture
def player():
    return FakePlayer()
