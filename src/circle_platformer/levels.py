"""Static level catalog.

Levels are immutable records loaded once at startup. Coordinates are
screen-style: x grows to the right, y grows downwards, so a platform's top
edge is its ``y`` and its bottom edge is ``y + height``.
"""

from dataclasses import dataclass, field
from typing import Tuple, Optional, Dict, Any, Iterator, Sequence


Point = Tuple[float, float]


@dataclass(frozen=True)
class Platform:
    """Axis-aligned solid rectangle owned by a level."""
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Platform at ({self.x}, {self.y}) needs a positive size, "
                f"got {self.width}x{self.height}"
            )

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, d: Dict[str, float]) -> "Platform":
        return cls(x=d["x"], y=d["y"], width=d["width"], height=d["height"])


@dataclass(frozen=True)
class Level:
    """One playable level: world bounds, solids and spawn points.

    Coins and enemies are plain positions; their runtime state (collected
    indices, alive flags) lives in the play session, never here.
    """
    id: int
    name: str
    width: float
    height: float
    platforms: Tuple[Platform, ...] = field(default_factory=tuple)
    coins: Tuple[Point, ...] = field(default_factory=tuple)
    enemies: Tuple[Point, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Level {self.id} needs positive bounds, got {self.width}x{self.height}"
            )
        # Accept lists from callers but store tuples so the record stays hashable
        object.__setattr__(self, "platforms", tuple(self.platforms))
        object.__setattr__(self, "coins", tuple(tuple(c) for c in self.coins))
        object.__setattr__(self, "enemies", tuple(tuple(e) for e in self.enemies))

    @property
    def coin_count(self) -> int:
        return len(self.coins)

    @property
    def enemy_count(self) -> int:
        return len(self.enemies)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain dictionary (JSON friendly)."""
        return {
            "id": self.id,
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "platforms": [p.to_dict() for p in self.platforms],
            "coins": [{"x": x, "y": y} for x, y in self.coins],
            "enemies": [{"x": x, "y": y} for x, y in self.enemies],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Level":
        return cls(
            id=d["id"],
            name=d.get("name", f"Level {d['id']}"),
            width=d["width"],
            height=d["height"],
            platforms=tuple(Platform.from_dict(p) for p in d.get("platforms", [])),
            coins=tuple((c["x"], c["y"]) for c in d.get("coins", [])),
            enemies=tuple((e["x"], e["y"]) for e in d.get("enemies", [])),
        )


class LevelCatalog:
    """Ordered, read-only collection of levels addressed by id."""

    def __init__(self, levels: Sequence[Level]):
        self._levels: Tuple[Level, ...] = tuple(levels)
        if not self._levels:
            raise ValueError("Level catalog must contain at least one level")

        self._by_id: Dict[int, Level] = {}
        for level in self._levels:
            if level.id in self._by_id:
                raise ValueError(f"Duplicate level id in catalog: {level.id}")
            self._by_id[level.id] = level

    def __iter__(self) -> Iterator[Level]:
        return iter(self._levels)

    def __len__(self) -> int:
        return len(self._levels)

    def __contains__(self, level_id: object) -> bool:
        return level_id in self._by_id

    @property
    def ids(self) -> Tuple[int, ...]:
        return tuple(level.id for level in self._levels)

    @property
    def first_id(self) -> int:
        return self._levels[0].id

    def get(self, level_id: Optional[int]) -> Optional[Level]:
        """Look up a level, returning None for unknown ids."""
        if level_id is None:
            return None
        return self._by_id.get(level_id)

    def next_level_id(self, level_id: int) -> Optional[int]:
        """Id unlocked by completing ``level_id``, if the catalog has one."""
        candidate = level_id + 1
        return candidate if candidate in self._by_id else None

    def to_list(self):
        return [level.to_dict() for level in self._levels]

    @classmethod
    def from_list(cls, data) -> "LevelCatalog":
        return cls([Level.from_dict(d) for d in data])


LEVELS: Tuple[Level, ...] = (
    Level(
        id=1,
        name="Level 1",
        width=800,
        height=400,
        platforms=(
            Platform(0, 380, 800, 20),  # ground
            Platform(300, 320, 100, 10),
        ),
        coins=((200, 300), (350, 250), (700, 300)),
        enemies=((450, 350),),
    ),
    Level(
        id=2,
        name="Level 2",
        width=1000,
        height=400,
        platforms=(
            Platform(0, 380, 1000, 20),  # ground
            Platform(450, 320, 120, 10),
            Platform(750, 280, 100, 10),
        ),
        coins=((150, 300), (500, 300), (800, 300)),
        enemies=((600, 350), (900, 350)),
    ),
)


def default_catalog() -> LevelCatalog:
    """The built-in two-level catalog."""
    return LevelCatalog(LEVELS)
