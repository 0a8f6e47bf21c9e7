"""Marker discovery and forwarding onto Tracker.track_event."""

import pytest

from Exp_Tracker.animations import Tracker, collect_marker_names, fetch_keyframe_sequence
from Exp_Tracker.engine import engine_config
from Exp_Tracker.engine.instances import Animation, Instance, InstanceKind
from Exp_Tracker.engine.animations import (
    KeyframeSequence,
    KeyframeSequenceError,
    KeyframeSequenceProvider,
    set_keyframe_provider,
)
from Exp_Tracker.developer import dev_logger


class FlakyProvider(KeyframeSequenceProvider):
    """Fails for selected animation ids."""

    def __init__(self, cache, failing):
        super().__init__(cache)
        self.failing = set(failing)

    def get_keyframe_sequence(self, animation_id):
        if animation_id in self.failing:
            raise ConnectionError(f"fetch failed for {animation_id}")
        return super().get_keyframe_sequence(animation_id)


class TestGetTrackEvents:
    def test_markers_per_track_in_timeline_order(self, folder, player, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        assert tracker.get_track_events() == {
            "Jump": ["Takeoff", "Land"],
            "Wave": ["Hand"],
        }
        assert tracker.track_events == tracker.get_track_events()

    def test_is_repeatable(self, folder, player, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        assert tracker.get_track_events() == tracker.get_track_events()

    def test_failed_fetch_skips_only_that_asset(self, folder, player, cache):
        tracker = Tracker(folder, player=player, keyframe_provider=FlakyProvider(cache, {"Jump"}))
        assert tracker.track_events == {"Wave": ["Hand"]}
        # Jump still plays, it just has no forwarded markers
        assert "Jump" in tracker.tracks

    def test_every_fetch_failing_gives_empty_registry(self, folder, player, cache):
        provider = FlakyProvider(cache, {"Idle", "Jump", "Wave"})
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        assert tracker.get_track_events() == {}

    def test_uses_registered_sequence_over_baked_markers(self, folder, player, provider):
        sequence = KeyframeSequence(name="Idle")
        first = sequence.add_keyframe(0.0)
        first.add_marker("Breathe")
        first.add(Instance(name="Pose", kind=InstanceKind.POSE))
        sequence.add(Instance(name="Scratch", kind=InstanceKind.OTHER))
        second = sequence.add_keyframe(1.0)
        second.add_marker("Blink")
        second.add_marker("Breathe")
        provider.register("Idle", sequence)

        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        assert tracker.track_events["Idle"] == ["Breathe", "Blink", "Breathe"]

    def test_falls_back_to_process_provider(self, folder, player, provider):
        set_keyframe_provider(provider)
        tracker = Tracker(folder, player=player)
        assert tracker.keyframe_provider is provider
        assert set(tracker.track_events) == {"Jump", "Wave"}

    def test_without_any_provider_reads_the_performer_cache(self, folder, player, animator):
        tracker = Tracker(folder, player=player)
        assert tracker.keyframe_provider.cache is animator.cache
        assert tracker.track_events == {
            "Jump": ["Takeoff", "Land"],
            "Wave": ["Hand"],
        }


class TestMarkerHelpers:
    def test_fetch_returns_none_and_logs_on_failure(self, cache):
        engine_config.DEBUG_CATEGORIES.add("track_events")
        provider = FlakyProvider(cache, {"Jump"})
        assert fetch_keyframe_sequence(provider, Animation(name="Jump")) is None
        messages = [e["message"] for e in dev_logger.get_buffer()]
        assert any(m.startswith("SKIP anim=Jump") for m in messages)

    def test_fetch_unknown_id_is_none(self):
        provider = KeyframeSequenceProvider()
        with pytest.raises(KeyframeSequenceError):
            provider.get_keyframe_sequence("Ghost")
        assert fetch_keyframe_sequence(provider, Animation(name="Ghost")) is None

    def test_collect_from_empty_sequence(self):
        assert collect_marker_names(KeyframeSequence(name="Empty")) == []


class TestSetEvents:
    def test_forwards_marker_names(self, folder, player, animator, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        received = []
        tracker.track_event.connect(received.append)

        tracker.play("Jump")
        animator.update(0.3)
        assert received == ["Takeoff"]
        animator.update(0.5)
        assert received == ["Takeoff", "Land"]

    def test_looping_track_fires_marker_every_loop(self, folder, player, animator, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        received = []
        tracker.track_event.connect(received.append)

        tracker.play("Wave")
        animator.update(0.6)
        animator.update(1.0)
        assert received == ["Hand", "Hand"]

    def test_markers_from_concurrent_tracks_share_one_channel(self, folder, player, animator, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        received = []
        tracker.track_event.connect(received.append)

        tracker.play("Jump")
        tracker.play("Wave")
        animator.update(0.3)
        animator.update(0.3)
        assert received == ["Takeoff", "Hand"]

    def test_stopped_tracks_fire_nothing(self, folder, player, animator, provider):
        tracker = Tracker(folder, player=player, keyframe_provider=provider)
        received = []
        tracker.track_event.connect(received.append)

        tracker.play("Jump")
        tracker.stop("Jump")
        animator.update(1.0)
        assert received == []
