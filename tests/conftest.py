"""Shared fixtures: a spawned local character with Idle/Jump/Wave baked."""

import pytest

from Exp_Tracker.engine import engine_config
from Exp_Tracker.engine.instances import Animation, Folder, Instance, InstanceKind
from Exp_Tracker.engine.character import Character, Player, set_local_player
from Exp_Tracker.engine.animations import (
    AnimationCache,
    Animator,
    BakedAnimation,
    KeyframeSequenceProvider,
    set_keyframe_provider,
)
from Exp_Tracker.developer import dev_logger, dev_debug_gate


@pytest.fixture(autouse=True)
def _reset_globals():
    yield
    set_local_player(None)
    set_keyframe_provider(None)
    dev_logger.clear_log()
    dev_debug_gate.reset_debug_timers()
    engine_config.DEBUG_CATEGORIES.clear()
    engine_config.DEBUG_MASTER_HZ = 30


@pytest.fixture
def cache():
    c = AnimationCache()
    c.add(BakedAnimation("Idle", 2.0, looping=True))
    c.add(BakedAnimation("Jump", 1.0, looping=False, markers=[("Takeoff", 0.25), ("Land", 0.75)]))
    c.add(BakedAnimation("Wave", 1.0, looping=True, markers=[("Hand", 0.5, "up")]))
    return c


@pytest.fixture
def player(cache):
    p = Player()
    p.spawn(Character("Hero", Animator("Hero", cache)))
    return p


@pytest.fixture
def animator(player):
    return player.character.animator


@pytest.fixture
def provider(cache):
    return KeyframeSequenceProvider(cache)


@pytest.fixture
def folder():
    # Nested folder plus a non-animation child that must be ignored
    return Folder(
        "Animations",
        Animation(name="Idle"),
        Folder("Moves", Animation(name="Jump"), Animation(name="Wave")),
        Instance(name="Notes", kind=InstanceKind.OTHER),
    )
