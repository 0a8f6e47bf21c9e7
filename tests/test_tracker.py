"""Tracker playback, chaining and teardown."""

import threading
import time

import pytest

from Exp_Tracker.animations import BaseTracker, Tracker
from Exp_Tracker.engine.instances import Animation, Folder
from Exp_Tracker.engine.character import Character, Player, set_local_player
from Exp_Tracker.engine.animations import Animator


def _playing(tracker):
    return sorted(name for name, track in tracker.tracks.items() if track.is_playing)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_registry_holds_only_animation_assets(self, folder, player, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        assert set(tracker.tracks) == {"Idle", "Jump", "Wave"}
        assert set(tracker.anims) == {"Idle", "Jump", "Wave"}

    def test_one_track_per_asset_on_the_character_animator(self, folder, player, animator, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        assert tracker.animator is animator
        assert len(animator.get_tracks()) == 3
        for name, track in tracker.tracks.items():
            assert track.animation is tracker.anims[name]

    def test_last_asset_wins_on_duplicate_names(self, player):
        folder = Folder(
            "Animations",
            Animation(name="Idle"),
            Folder("Alt", Animation(name="Idle", animation_id="Wave")),
        )
        tracker = BaseTracker(folder, player=player)
        assert list(tracker.tracks) == ["Idle"]
        assert tracker.tracks["Idle"].animation.animation_id == "Wave"

    def test_event_variant_rejects_missing_folder(self, player, provider):
        with pytest.raises(ValueError, match="Animation folder invalid!"):
            Tracker(None, player=player, keyframe_provider=provider)

    def test_base_variant_has_no_folder_guard(self, player):
        with pytest.raises(AttributeError):
            BaseTracker(None, player=player)

    def test_unloaded_animation_id_fails_construction(self, player):
        folder = Folder("Animations", Animation(name="Missing"))
        with pytest.raises(ValueError, match="Missing"):
            BaseTracker(folder, player=player)

    def test_failed_construction_releases_loaded_tracks(self, player, animator):
        folder = Folder("Animations", Animation(name="Idle"), Animation(name="Missing"))
        with pytest.raises(ValueError, match="Missing"):
            BaseTracker(folder, player=player)
        assert animator.get_tracks() == []
        assert animator.get_compute_job_data()["playing"] == []

    def test_defaults_to_local_player(self, folder, player, provider):
        set_local_player(player)
        tracker = Tracker(folder, keyframe_provider=provider)
        assert tracker.player is player
        assert tracker.character is player.character

    def test_waits_for_character_to_spawn(self, folder, cache, provider):
        late = Player()
        character = Character("Late", Animator("Late", cache))
        timer = threading.Timer(0.05, late.spawn, args=(character,))
        timer.start()
        try:
            tracker = Tracker(folder, player=late, keyframe_provider=provider, timeout=5.0)
        finally:
            timer.join()
        assert tracker.character is character
        assert len(tracker.tracks) == 3

    def test_gives_up_waiting_after_timeout(self, folder, provider):
        with pytest.raises(TimeoutError):
            Tracker(folder, player=Player(), keyframe_provider=provider, timeout=0.01)

    def test_zero_timeout_fails_without_blocking(self, folder, provider):
        started = time.perf_counter()
        with pytest.raises(TimeoutError):
            Tracker(folder, player=Player(), keyframe_provider=provider, timeout=0)
        assert time.perf_counter() - started < 1.0


# ---------------------------------------------------------------------------
# play / stop / stop_all
# ---------------------------------------------------------------------------


class TestPlayback:
    def test_idle_jump_scenario(self, player):
        folder = Folder("Animations", Animation(name="Idle"), Animation(name="Jump"))
        tracker = BaseTracker(folder, player=player)
        assert set(tracker.tracks) == {"Idle", "Jump"}

        tracker.play("Idle")
        assert _playing(tracker) == ["Idle"]

        tracker.play("Jump", exclusive=True)
        assert _playing(tracker) == ["Jump"]

        tracker.stop("Jump")
        assert _playing(tracker) == []

        stopped = []
        for track in tracker.tracks.values():
            track.stopped.connect(lambda: stopped.append(True))
        tracker.stop_all()
        assert stopped == []
        assert _playing(tracker) == []

    def test_unknown_names_are_ignored(self, folder, player, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        tracker.play("Nope", 2.0, 0.5, True)
        tracker.stop("Nope")
        assert tracker.last_track is None
        assert _playing(tracker) == []

    def test_unknown_name_with_exclusive_keeps_others_playing(self, folder, player, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        tracker.play("Idle")
        tracker.play("Nope", exclusive=True)
        assert _playing(tracker) == ["Idle"]

    def test_defaults_speed_and_weight(self, folder, player, animator, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        tracker.play("Idle")
        track = tracker.tracks["Idle"]
        assert track.speed == 1.0
        assert track.weight_target == 1.0
        assert tracker.last_track is track

    def test_weight_ramps_over_a_tenth_of_a_second(self, folder, player, animator, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        tracker.play("Idle", weight=0.8)
        track = tracker.tracks["Idle"]
        animator.update(0.05)
        assert track.weight_current == pytest.approx(0.4)
        animator.update(0.05)
        assert track.weight_current == pytest.approx(0.8)

    def test_speed_is_applied(self, folder, player, animator, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        tracker.play("Idle", playback_speed=2.0)
        animator.update(0.25)
        assert tracker.tracks["Idle"].time_position == pytest.approx(0.5)

    def test_replaying_a_playing_track_changes_nothing(self, folder, player, animator, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        tracker.play("Idle", playback_speed=2.0, weight=0.5)
        animator.update(0.2)
        track = tracker.tracks["Idle"]
        position = track.time_position

        tracker.play("Idle", playback_speed=3.0, weight=1.0)
        assert track.speed == 2.0
        assert track.weight_target == 0.5
        assert track.time_position == position

    def test_exclusive_stops_every_other_track(self, folder, player, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        tracker.play("Idle")
        tracker.play("Wave")
        tracker.play("Jump", exclusive=True)
        assert _playing(tracker) == ["Jump"]

    def test_stop_ignores_tracks_that_are_not_playing(self, folder, player, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        stopped = []
        tracker.tracks["Idle"].stopped.connect(lambda: stopped.append(True))
        tracker.stop("Idle")
        tracker.play("Idle")
        tracker.stop("Idle")
        tracker.stop("Idle")
        assert stopped == [True]

    def test_stop_all_halts_tracks_started_outside_the_tracker(self, folder, player, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        tracker.tracks["Wave"].play()
        tracker.play("Idle")
        tracker.stop_all()
        assert _playing(tracker) == []


# ---------------------------------------------------------------------------
# and_then_play
# ---------------------------------------------------------------------------


class TestChainedPlay:
    def test_no_op_before_anything_played(self, folder, player, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        tracker.and_then_play("Idle")
        assert all(t.ended.connection_count == 0 for t in tracker.tracks.values())
        assert _playing(tracker) == []

    def test_plays_once_the_last_track_has_ended(self, folder, player, animator, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        jump = tracker.tracks["Jump"]
        tracker.play("Jump")
        tracker.and_then_play("Idle", 1.5, 0.5)

        animator.update(0.5)
        assert _playing(tracker) == ["Jump"]

        # Reaches the end: stops, then fades out
        animator.update(0.6)
        assert not jump.is_playing
        assert _playing(tracker) == []

        animator.update(0.2)
        assert _playing(tracker) == ["Idle"]
        idle = tracker.tracks["Idle"]
        assert idle.speed == 1.5
        assert idle.weight_target == 0.5
        assert tracker.last_track is idle
        assert jump.ended.connection_count == 0

    def test_fires_exactly_once(self, folder, player, animator, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        tracker.play("Jump")
        tracker.and_then_play("Idle")
        tracker.stop("Jump")
        animator.update(0.2)
        assert tracker.is_playing("Idle")

        tracker.stop("Idle")
        animator.update(0.2)
        tracker.play("Jump")
        tracker.stop("Jump")
        animator.update(0.2)
        assert not tracker.is_playing("Idle")

    def test_new_chain_replaces_pending_one(self, folder, player, animator, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        jump = tracker.tracks["Jump"]
        tracker.play("Jump")
        tracker.and_then_play("Idle")
        tracker.and_then_play("Wave")
        assert jump.ended.connection_count == 1

        tracker.stop("Jump")
        animator.update(0.2)
        assert _playing(tracker) == ["Wave"]

    def test_chain_passes_exclusive_through(self, folder, player, animator, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        tracker.play("Idle")
        tracker.play("Jump")
        tracker.and_then_play("Wave", exclusive=True)
        tracker.stop("Jump")
        animator.update(0.2)
        assert _playing(tracker) == ["Wave"]


# ---------------------------------------------------------------------------
# destroy
# ---------------------------------------------------------------------------


class TestDestroy:
    def test_releases_tracks_and_listeners(self, folder, player, animator, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        received = []
        tracker.track_event.connect(received.append)
        tracker.play("Jump")
        tracker.and_then_play("Idle")
        tracks = list(tracker.tracks.values())

        tracker.destroy()

        assert tracker.destroyed
        assert animator.get_tracks() == []
        assert tracker.track_event.connection_count == 0
        assert all(not t.is_playing for t in tracks)
        assert all(t.ended.connection_count == 0 for t in tracks)

        animator.update(1.0)
        assert received == []

    def test_methods_raise_after_destroy(self, folder, player, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        tracker.destroy()
        for call in (
            lambda: tracker.play("Idle"),
            lambda: tracker.and_then_play("Idle"),
            tracker.stop_all,
            lambda: tracker.stop("Idle"),
            tracker.get_track_events,
            lambda: tracker.is_playing("Idle"),
            tracker.destroy,
        ):
            with pytest.raises(RuntimeError):
                call()

    def test_base_variant_destroy(self, folder, player, animator):
        tracker = BaseTracker(folder, player=player)
        tracker.play("Idle")
        tracker.destroy()
        assert animator.get_tracks() == []
        assert not tracker.tracks["Idle"].is_playing
