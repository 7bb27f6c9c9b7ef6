"""Game mode state machine: level select, playing, game over.

GameState is an immutable snapshot. Every transition is a plain function
taking the current state and returning the next one; a transition asked for
from a mode that does not define it returns the state unchanged.

    LEVEL_SELECT --select_level--> PLAYING
    PLAYING --lives reach 0--> GAME_OVER
    PLAYING --all coins + all enemies dead--> LEVEL_SELECT (unlocks id + 1)
    GAME_OVER --restart_level--> PLAYING
    GAME_OVER --back_to_level_select--> LEVEL_SELECT
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, FrozenSet, Tuple, Iterable

from .config import GameConfig
from .entities import Enemy, spawn_enemies
from .levels import Level, LevelCatalog
from .physics import PlayerState


class Mode(Enum):
    LEVEL_SELECT = "level-select"
    PLAYING = "playing"
    GAME_OVER = "game-over"


@dataclass(frozen=True)
class Session:
    """Everything owned by one level attempt."""
    level: Level
    player: PlayerState
    lives: int
    collected: FrozenSet[int] = frozenset()
    enemies: Tuple[Enemy, ...] = ()
    ticks: int = 0

    @classmethod
    def start(cls, level: Level, config: GameConfig) -> "Session":
        """Fresh attempt: player at spawn, full lives, nothing collected."""
        return cls(
            level=level,
            player=PlayerState.spawn(config.entities.player_start),
            lives=config.entities.starting_lives,
            collected=frozenset(),
            enemies=spawn_enemies(level),
        )

    @property
    def coins_collected(self) -> int:
        return len(self.collected)

    @property
    def enemies_alive(self) -> int:
        return sum(1 for e in self.enemies if e.alive)

    @property
    def is_complete(self) -> bool:
        """All coins collected and no enemy left alive."""
        return (
            len(self.collected) == self.level.coin_count
            and all(not e.alive for e in self.enemies)
        )


@dataclass(frozen=True)
class GameState:
    """Full game snapshot.

    ``level_id`` is the last selected level; it survives into GAME_OVER so
    the level can be restarted. ``session`` exists only while PLAYING.
    """
    mode: Mode
    unlocked: FrozenSet[int]
    level_id: Optional[int] = None
    session: Optional[Session] = None

    @property
    def active_level(self) -> Optional[Level]:
        if self.mode is Mode.PLAYING and self.session is not None:
            return self.session.level
        return None


def initial_state(
    catalog: LevelCatalog, unlocked: Optional[Iterable[int]] = None
) -> GameState:
    """Start at level select with only the first level unlocked.

    ``unlocked`` can pre-unlock extra levels; ids missing from the catalog
    are dropped and the first level is always included.
    """
    ids = {catalog.first_id}
    if unlocked is not None:
        ids.update(i for i in unlocked if i in catalog)
    return GameState(mode=Mode.LEVEL_SELECT, unlocked=frozenset(ids))


def is_selectable(state: GameState, level_id: int) -> bool:
    return level_id in state.unlocked


def _enter_level(state: GameState, level_id: Optional[int], config: GameConfig) -> GameState:
    level = config.levels.get(level_id)
    if level is None:
        # No record for this id: stay on the menu without an active level
        return replace(state, mode=Mode.LEVEL_SELECT, level_id=None, session=None)
    return replace(
        state,
        mode=Mode.PLAYING,
        level_id=level.id,
        session=Session.start(level, config),
    )


def select_level(state: GameState, level_id: int, config: GameConfig) -> GameState:
    """LEVEL_SELECT -> PLAYING for an unlocked level."""
    if state.mode is not Mode.LEVEL_SELECT:
        return state
    if not is_selectable(state, level_id):
        return state
    return _enter_level(state, level_id, config)


def restart_level(state: GameState, config: GameConfig) -> GameState:
    """GAME_OVER -> PLAYING on the same level with a full reset."""
    if state.mode is not Mode.GAME_OVER:
        return state
    return _enter_level(state, state.level_id, config)


def back_to_level_select(state: GameState) -> GameState:
    """GAME_OVER -> LEVEL_SELECT."""
    if state.mode is not Mode.GAME_OVER:
        return state
    return replace(state, mode=Mode.LEVEL_SELECT, level_id=None, session=None)


def game_over(state: GameState) -> GameState:
    """PLAYING -> GAME_OVER. The session is discarded; the level id is kept."""
    if state.mode is not Mode.PLAYING:
        return state
    return replace(state, mode=Mode.GAME_OVER, session=None)


def complete_level(state: GameState, catalog: LevelCatalog) -> Tuple[GameState, Optional[int]]:
    """PLAYING -> LEVEL_SELECT after a cleared level.

    Returns the new state and the newly unlocked level id, if any.
    """
    if state.mode is not Mode.PLAYING or state.session is None:
        return state, None

    unlocked = state.unlocked
    newly_unlocked = None
    next_id = catalog.next_level_id(state.session.level.id)
    if next_id is not None and next_id not in unlocked:
        unlocked = unlocked | {next_id}
        newly_unlocked = next_id

    new_state = replace(
        state,
        mode=Mode.LEVEL_SELECT,
        unlocked=unlocked,
        level_id=None,
        session=None,
    )
    return new_state, newly_unlocked
