"""Frame orchestration: one simulation tick per rendered frame.

``tick`` is a pure function from the previous GameState and a sampled
InputIntent to the next GameState. Within a tick the order is fixed:

    intent -> physics -> coins/enemies -> game over / completion check

The first three stages are ``play`` (session in, session out); the last is
``settle``, which applies the mode transitions. Keeping them apart lets a
host report the session as it was on the tick that ended it.

``Simulation`` owns the current snapshot for a host loop (pygame window or
Gymnasium env). It only ticks while PLAYING; once the mode changes, further
``step`` calls do nothing until a menu transition starts a new session.
"""

from dataclasses import dataclass, replace, field
from typing import Optional, Tuple, Dict, Any, Iterable, FrozenSet

from .config import GameConfig
from .input_state import InputIntent
from .levels import Level
from .physics import step_player
from .entities import resolve_entities
from .progression import (
    Mode,
    GameState,
    Session,
    initial_state,
    select_level,
    restart_level,
    back_to_level_select,
    game_over,
    complete_level,
)


@dataclass(frozen=True)
class TickEvents:
    """What happened during one tick (for messages and rewards)."""
    coins: Tuple[int, ...] = ()
    stomped: Tuple[int, ...] = ()
    hits: int = 0
    jumped: bool = False
    hit_ceiling: bool = False
    completed_level: Optional[int] = None
    unlocked_level: Optional[int] = None
    game_over: bool = False


@dataclass(frozen=True)
class FrameState:
    """Read-only snapshot handed to a renderer once per frame."""
    mode: Mode
    level_id: Optional[int]
    unlocked: Tuple[int, ...]
    player_position: Tuple[float, float] = (0.0, 0.0)
    player_velocity: Tuple[float, float] = (0.0, 0.0)
    grounded: bool = False
    coins_visible: Tuple[bool, ...] = ()
    enemies: Tuple[Tuple[float, float, bool], ...] = field(default_factory=tuple)
    enemies_alive: int = 0
    lives: int = 0
    coins_collected: int = 0
    coins_total: int = 0
    tick: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "level_id": self.level_id,
            "unlocked": list(self.unlocked),
            "player_position": list(self.player_position),
            "player_velocity": list(self.player_velocity),
            "grounded": self.grounded,
            "coins_visible": list(self.coins_visible),
            "enemies": [
                {"x": x, "y": y, "alive": alive} for x, y, alive in self.enemies
            ],
            "enemies_alive": self.enemies_alive,
            "lives": self.lives,
            "coins_collected": self.coins_collected,
            "coins_total": self.coins_total,
            "tick": self.tick,
        }


def play(session: Session, intent: InputIntent, config: GameConfig) -> Tuple[Session, TickEvents]:
    """Physics then coin/enemy resolution for one tick of a session.

    No mode transition happens here; ``events.game_over`` only reports that
    the session ran out of lives.
    """
    level = session.level

    step = step_player(session.player, intent, level, config.physics)

    outcome = resolve_entities(
        step.player,
        level,
        session.collected,
        session.enemies,
        session.lives,
        config.physics,
        config.entities,
    )

    session = replace(
        session,
        player=outcome.player,
        collected=outcome.collected,
        enemies=outcome.enemies,
        lives=outcome.lives,
        ticks=session.ticks + 1,
    )

    events = TickEvents(
        coins=outcome.new_coins,
        stomped=outcome.stomped,
        hits=outcome.hits,
        jumped=step.jumped,
        hit_ceiling=step.hit_ceiling,
        game_over=outcome.game_over,
    )
    return session, events


def settle(
    state: GameState, session: Session, events: TickEvents, config: GameConfig
) -> Tuple[GameState, TickEvents]:
    """Store the played session and apply game over or level completion."""
    next_state = replace(state, session=session)

    if events.game_over:
        return game_over(next_state), events

    if session.is_complete:
        next_state, unlocked = complete_level(next_state, config.levels)
        events = replace(events, completed_level=session.level.id, unlocked_level=unlocked)

    return next_state, events


def tick(state: GameState, intent: InputIntent, config: GameConfig) -> Tuple[GameState, TickEvents]:
    """Advance a PLAYING state by one tick; other modes come back unchanged."""
    if state.mode is not Mode.PLAYING or state.session is None:
        return state, TickEvents()

    session, events = play(state.session, intent, config)
    return settle(state, session, events, config)


def session_frame(session: Session, mode: Mode, unlocked: FrozenSet[int]) -> FrameState:
    """In-level view of a session, tagged with the given mode."""
    level = session.level
    player = session.player
    return FrameState(
        mode=mode,
        level_id=level.id,
        unlocked=tuple(sorted(unlocked)),
        player_position=player.position,
        player_velocity=player.velocity,
        grounded=player.grounded,
        coins_visible=tuple(i not in session.collected for i in range(level.coin_count)),
        enemies=tuple((e.x, e.y, e.alive) for e in session.enemies),
        enemies_alive=session.enemies_alive,
        lives=session.lives,
        coins_collected=session.coins_collected,
        coins_total=level.coin_count,
        tick=session.ticks,
    )


def frame_state(state: GameState) -> FrameState:
    """Project a GameState onto what a renderer needs."""
    session = state.session
    if state.mode is not Mode.PLAYING or session is None:
        return FrameState(
            mode=state.mode, level_id=None, unlocked=tuple(sorted(state.unlocked)),
        )
    return session_frame(session, state.mode, state.unlocked)


class Simulation:
    """Owns the current GameState and drives it one tick at a time.

    ``last_frame`` is the in-level view after the most recent tick. Unlike
    ``frame()`` it is kept when that tick ended the level, so the final
    lives, coins and enemy flags stay readable.

    Usage:
        sim = Simulation(GameConfig())
        sim.select_level(1)
        while sim.running:
            events = sim.step(input_state.snapshot())
            draw(sim.frame())
    """

    def __init__(self, config: Optional[GameConfig] = None, unlocked: Optional[Iterable[int]] = None):
        """Create a simulation at the level-select screen.

        Args:
            config: Game configuration. Uses defaults if None.
            unlocked: Extra level ids to unlock from the start.
        """
        self.config = config or GameConfig()
        self.state = initial_state(self.config.levels, unlocked)
        self.last_events = TickEvents()
        self.last_frame: Optional[FrameState] = None

    @property
    def mode(self) -> Mode:
        return self.state.mode

    @property
    def running(self) -> bool:
        """Whether the next frame should run a tick."""
        return self.state.mode is Mode.PLAYING

    @property
    def session(self) -> Optional[Session]:
        return self.state.session

    @property
    def level(self) -> Optional[Level]:
        return self.state.active_level

    @property
    def unlocked(self) -> Tuple[int, ...]:
        return tuple(sorted(self.state.unlocked))

    def _started(self) -> bool:
        self.last_events = TickEvents()
        self.last_frame = self.frame() if self.running else None
        return self.running

    def select_level(self, level_id: int) -> bool:
        """Start a level from the menu. Returns True if play started."""
        self.state = select_level(self.state, level_id, self.config)
        return self._started()

    def restart_level(self) -> bool:
        """Replay the failed level from scratch. Returns True if play started."""
        self.state = restart_level(self.state, self.config)
        return self._started()

    def back_to_level_select(self) -> None:
        self.state = back_to_level_select(self.state)

    def step(self, intent: InputIntent) -> TickEvents:
        """Run one tick with an already-sampled intent."""
        if not self.running:
            return TickEvents()
        session, events = play(self.state.session, intent, self.config)
        self.state, self.last_events = settle(self.state, session, events, self.config)
        self.last_frame = session_frame(session, self.state.mode, self.state.unlocked)
        return self.last_events

    def frame(self) -> FrameState:
        return frame_state(self.state)
