# Exp_Tracker/engine/character.py
"""
Character and Player - Who the tracker animates.

The Player owns at most one spawned Character; each Character owns the
Animator (performer) that plays its tracks. Code that needs the character
before it exists waits on Player.wait_for_character().

Spawning may happen on another thread (loader, Blender timer), so the
ready-state is guarded by a Condition. Listeners on character_added run on
the spawning thread.
"""

import threading
from typing import Optional

from .animations.animator import Animator
from .signal import Signal
from ..developer.dev_logger import log_game


class Character:
    """A spawned character and its performer."""

    def __init__(self, name: str, animator: Optional[Animator] = None):
        self.name = name
        self.animator = animator if animator is not None else Animator(owner_name=name)

    def __repr__(self) -> str:
        return f"Character('{self.name}')"


class Player:
    """
    The user driving a character.

    Usage:
        player = Player()
        player.spawn(Character("Hero"))
        character = player.character or player.wait_for_character(timeout=5.0)
    """

    def __init__(self, name: str = "LocalPlayer"):
        self.name = name
        self.character: Optional[Character] = None
        self.character_added = Signal("CharacterAdded")
        self._ready = threading.Condition()

    def spawn(self, character: Character) -> Character:
        with self._ready:
            self.character = character
            self._ready.notify_all()

        log_game("CHARACTER", f"SPAWN player={self.name} character={character.name}")
        self.character_added.fire(character)
        return character

    def despawn(self) -> Optional[Character]:
        with self._ready:
            character, self.character = self.character, None

        if character is not None:
            log_game("CHARACTER", f"DESPAWN player={self.name} character={character.name}")
        return character

    def wait_for_character(self, timeout: Optional[float] = None) -> Character:
        """
        Block until a character is spawned.

        Raises:
            TimeoutError: nothing spawned within `timeout` seconds
        """
        with self._ready:
            if not self._ready.wait_for(lambda: self.character is not None, timeout):
                raise TimeoutError(f"Character for '{self.name}' did not spawn within {timeout}s")
            return self.character


# Process-wide local player
_local_player: Optional[Player] = None


def get_local_player() -> Player:
    global _local_player
    if _local_player is None:
        _local_player = Player()
    return _local_player


def set_local_player(player: Optional[Player]) -> None:
    global _local_player
    _local_player = player
