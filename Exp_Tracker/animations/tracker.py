# Exp_Tracker/animations/tracker.py
"""
Tracker - Name-keyed animation track manager for the local character.

Loads every Animation found under a container, creates one AnimationTrack
per asset on the character's Animator, and exposes play/stop/chain
operations by name. Unknown names are silently ignored.

Two variants:
- BaseTracker: tracks and playback only
- Tracker: also discovers timeline markers in each asset and forwards every
  "marker reached" notification onto one outgoing signal, `track_event`

Usage:
    tracker = Tracker(anims_folder)
    tracker.track_event.connect(lambda marker: print("hit", marker))

    tracker.play("Idle")
    tracker.play("Jump", exclusive=True)
    tracker.and_then_play("Idle")     # once Jump has ended
    ...
    tracker.destroy()

All timing, fading and marker firing happen in the Animator; the tracker
only configures and queries it.
"""

from typing import Dict, List, Optional

from ..engine import engine_config
from ..engine.instances import Animation, Instance, InstanceKind
from ..engine.signal import Signal
from ..engine.character import Player, get_local_player
from ..engine.animations.track import AnimationTrack
from ..engine.animations.keyframes import KeyframeSequenceProvider, get_keyframe_provider
from .cleanup import TaskBin
from .markers import fetch_keyframe_sequence, collect_marker_names
from ..developer.dev_logger import log_game


class BaseTracker:
    """
    Animation track manager without marker events.

    Attributes:
        player: Player whose character is animated
        character: The spawned character
        animator: The character's performer
        anims: {name: Animation} indexed from the container
        tracks: {name: AnimationTrack}, fixed after construction
        last_track: Most recently started track (for and_then_play)
    """

    def __init__(
        self,
        anims_folder: Instance,
        player: Optional[Player] = None,
        timeout: Optional[float] = engine_config.CHARACTER_WAIT_TIMEOUT
    ):
        self._tasks = TaskBin()
        self._chain_tasks = self._tasks.add(TaskBin())
        self._anim_folder = anims_folder

        self.player = player if player is not None else get_local_player()
        self.character = self.player.character or self.player.wait_for_character(timeout)
        self.animator = self.character.animator

        self.anims: Dict[str, Animation] = {}
        self.tracks: Dict[str, AnimationTrack] = {}
        self.last_track: Optional[AnimationTrack] = None
        self._destroyed = False

        # Release whatever was acquired before a failed init
        try:
            self.init()
        except BaseException:
            self._tasks.do_cleaning()
            raise

    def init(self) -> None:
        """Index animations under the container and load a track for each."""
        self._check_alive()

        # Last asset wins on duplicate names
        for instance in self._anim_folder.get_descendants():
            if instance.is_a(InstanceKind.ANIMATION):
                self.anims[instance.name] = instance

        for name, anim in self.anims.items():
            self.tracks[name] = self._tasks.add(self.animator.load_animation(anim))

        log_game("TRACKER", f"INIT folder={self._anim_folder.name} tracks={len(self.tracks)}")

    # =========================================================================
    # PLAYBACK
    # =========================================================================

    def play(
        self,
        action: str,
        playback_speed: Optional[float] = None,
        weight: Optional[float] = None,
        exclusive: bool = False
    ) -> None:
        """
        Play an animation by name.

        Args:
            action: Name of the animation to play
            playback_speed: How fast the animation plays (default 1)
            weight: Blend weight to ramp to (default 1)
            exclusive: Stop every other playing animation first

        A track that is already playing is left untouched.
        """
        self._check_alive()
        track = self.tracks.get(action)
        if track is None:
            return

        if exclusive:
            self.stop_all()

        if playback_speed is None:
            playback_speed = engine_config.DEFAULT_SPEED
        if weight is None:
            weight = engine_config.DEFAULT_WEIGHT

        if not track.is_playing:
            track.adjust_weight(weight, engine_config.WEIGHT_FADE_TIME)
            track.play()
            track.adjust_speed(playback_speed)
            self.last_track = track
            log_game("TRACKER", f"PLAY track={action} speed={playback_speed} weight={weight} exclusive={bool(exclusive)}")

    def and_then_play(
        self,
        action: str,
        playback_speed: Optional[float] = None,
        weight: Optional[float] = None,
        exclusive: bool = False
    ) -> None:
        """
        Play an animation once the last started track has ended.

        No-op if nothing has been played yet. Only one chained play is
        pending at a time: a new call replaces the previous one.
        """
        self._check_alive()
        if self.last_track is None:
            return

        self._chain_tasks.do_cleaning()

        def _on_ended():
            self.play(action, playback_speed, weight, exclusive)
            self._chain_tasks.do_cleaning()

        self._chain_tasks.give_task(self.last_track.ended.connect(_on_ended))
        log_game("TRACKER", f"CHAIN after={self.last_track.name} next={action}")

    def stop(self, action: str) -> None:
        """Stop an animation by name (host default fade)."""
        self._check_alive()
        track = self.tracks.get(action)
        if track is None:
            return

        if track.is_playing:
            track.stop()

    def stop_all(self) -> None:
        """Stop every playing animation."""
        self._check_alive()
        for track in self.tracks.values():
            if track.is_playing:
                track.stop()

    def is_playing(self, action: str) -> bool:
        self._check_alive()
        track = self.tracks.get(action)
        return track is not None and track.is_playing

    # =========================================================================
    # TEARDOWN
    # =========================================================================

    def destroy(self) -> None:
        """Stop everything and release all tracks and listeners."""
        self._check_alive()
        self.stop_all()
        self._tasks.do_cleaning()
        self.last_track = None
        self._destroyed = True
        log_game("TRACKER", f"DESTROY folder={self._anim_folder.name}")

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def _check_alive(self) -> None:
        if self._destroyed:
            raise RuntimeError(f"{type(self).__name__} has been destroyed")


class Tracker(BaseTracker):
    """
    Animation track manager with marker events.

    Attributes (in addition to BaseTracker):
        keyframe_provider: Source of keyframe sequences
        track_events: {track name: [marker names]} for tracks with markers
        track_event: Signal fired with a marker name whenever any track
                     reaches one of its markers
    """

    def __init__(
        self,
        anims_folder: Instance,
        player: Optional[Player] = None,
        keyframe_provider: Optional[KeyframeSequenceProvider] = None,
        timeout: Optional[float] = engine_config.CHARACTER_WAIT_TIMEOUT
    ):
        if anims_folder is None:
            raise ValueError("Animation folder invalid!")

        self.keyframe_provider = keyframe_provider
        self.track_event = Signal("TrackEvent")
        self.track_events: Dict[str, List[str]] = {}

        super().__init__(anims_folder, player=player, timeout=timeout)
        self._tasks.add(self.track_event)

    def init(self) -> None:
        super().init()
        if self.keyframe_provider is None:
            self.keyframe_provider = self._default_provider()
        self.track_events = self.get_track_events()
        self.set_events()

    def get_track_events(self) -> Dict[str, List[str]]:
        """
        Marker names per track, read fresh from the keyframe provider.

        Assets whose keyframe data cannot be fetched and assets without
        markers are left out.
        """
        self._check_alive()
        track_events: Dict[str, List[str]] = {}
        for name, anim in self.anims.items():
            sequence = fetch_keyframe_sequence(self.keyframe_provider, anim)
            if sequence is None:
                continue
            markers = collect_marker_names(sequence)
            if markers:
                track_events[name] = markers
        return track_events

    def set_events(self) -> None:
        """Forward every known marker of every track onto track_event."""
        self._check_alive()
        for track_name, track in self.tracks.items():
            events = self.track_events.get(track_name)
            if not events:
                continue
            for event in events:
                signal = track.get_marker_reached_signal(event)
                self._tasks.give_task(signal.connect(self._forwarder(event)))

        bound = sum(len(v) for v in self.track_events.values())
        log_game("TRACK-EVENTS", f"BIND tracks={len(self.track_events)} markers={bound}")

    def _default_provider(self) -> KeyframeSequenceProvider:
        """Process-wide provider, or one over the performer's cache when it has none."""
        provider = get_keyframe_provider()
        if provider.cache is None:
            provider = KeyframeSequenceProvider(self.animator.cache)
        return provider

    def _forwarder(self, event: str):
        def _forward(*_args):
            self.track_event.fire(event)
        return _forward
