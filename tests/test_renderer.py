"""
Tests for the pygame presenter's audio schedule and game-over banner.
"""

import os

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
pygame = pytest.importorskip("pygame")

from egg_catcher.catch_core.collaborators import SOUND_BOMB_FALL, SOUND_DEATH
from egg_catcher.catch_core.config_loader import load_config
from egg_catcher.catch_core.game import CoreGame
from egg_catcher.catch_core.render_full_pygame import PygameRenderer


class FakeChannel:
    def __init__(self):
        self.events = []

    def pause(self):
        self.events.append("pause")

    def unpause(self):
        self.events.append("unpause")

    def stop(self):
        self.events.append("stop")


class FakeSound:
    """Stands in for pygame.mixer.Sound and counts plays."""

    def __init__(self):
        self.plays = []
        self.channel = FakeChannel()

    def play(self, loops=0):
        self.plays.append(loops)
        return self.channel


class ManualClock:
    def __init__(self):
        self.ms = 0.0

    def __call__(self):
        return self.ms


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def renderer(config, clock):
    renderer = PygameRenderer(config, now_fn=clock)
    yield renderer
    renderer.close()


def with_sounds(renderer, *names):
    sounds = {name: FakeSound() for name in names}
    renderer._sounds.update(sounds)
    return sounds


class TestDelayedSounds:
    """Test the death sound delay."""

    def test_death_sound_waits_one_second(self, renderer, clock):
        sounds = with_sounds(renderer, SOUND_DEATH)

        renderer.request_sound(SOUND_DEATH)
        clock.ms = 999
        renderer.update_audio()
        assert sounds[SOUND_DEATH].plays == []

        clock.ms = 1000
        renderer.update_audio()
        renderer.update_audio()
        assert sounds[SOUND_DEATH].plays == [0]

    def test_other_sounds_play_at_once(self, renderer):
        sounds = with_sounds(renderer, SOUND_BOMB_FALL)
        renderer.request_sound(SOUND_BOMB_FALL)
        assert sounds[SOUND_BOMB_FALL].plays == [0]

    def test_restart_drops_pending_death_sound(self, renderer, clock):
        sounds = with_sounds(renderer, SOUND_DEATH)

        renderer.request_sound(SOUND_DEATH)
        renderer.reset_effects()
        clock.ms = 5000
        renderer.update_audio()

        assert sounds[SOUND_DEATH].plays == []

    def test_game_over_by_death_through_core(self, config, renderer, clock):
        """A death ending queues the sound rather than playing it during the final frame."""
        sounds = with_sounds(renderer, SOUND_DEATH)
        game = CoreGame(config=config, seed=1, presenter=renderer)
        game.start()

        game.terminate("death")
        assert sounds[SOUND_DEATH].plays == []

        clock.ms = 1000
        renderer.render(game.get_render_data(), 160, 120)
        assert sounds[SOUND_DEATH].plays == [0]


class TestMusic:
    """Test the looping background track."""

    def test_music_loops_and_follows_pause(self, renderer):
        sounds = with_sounds(renderer, "bgm")
        renderer.start_music()
        renderer.start_music()

        renderer.notify_paused(True)
        renderer.notify_paused(False)
        renderer.notify_terminal("time", 50)

        assert sounds["bgm"].plays == [-1]
        assert sounds["bgm"].channel.events == ["pause", "unpause", "stop"]

    def test_restart_restarts_music(self, renderer):
        sounds = with_sounds(renderer, "bgm")
        renderer.start_music()
        renderer.notify_terminal("death", -100)
        renderer.reset_effects()

        assert sounds["bgm"].plays == [-1, -1]

    def test_pause_without_music_is_quiet(self, renderer):
        renderer.notify_paused(True)
        renderer.notify_paused(False)


class TestFinalScoreBanner:
    """Test the count-up of the final score."""

    def test_counts_up_then_holds(self, renderer):
        renderer.notify_terminal("time", 600)

        shown = [renderer._count_up(600) for _ in range(70)]

        assert shown[0] == 10
        assert all(b >= a for a, b in zip(shown, shown[1:]))
        assert shown[59] == 600
        assert shown[-1] == 600

    def test_counts_down_for_negative_scores(self, renderer):
        renderer.notify_terminal("death", -120)

        shown = [renderer._count_up(-120) for _ in range(70)]

        assert shown[0] == -2
        assert shown[-1] == -120

    def test_banner_renders(self, config, renderer):
        game = CoreGame(config=config, seed=1, presenter=renderer)
        game.start()
        game.terminate("time")

        image = renderer.render(game.get_render_data(), 160, 120)

        assert image.shape == (120, 160, 3)
