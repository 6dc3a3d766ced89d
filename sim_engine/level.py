"""
Reference Side-Scroller Level

A small deterministic platformer used to drive the planner end to end: a flat
floor with pits, a goal line on the right and a tick limit. Coordinates follow
screen convention (y grows downward), so falling into a pit increases y until
the player drops below the kill line.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .forward_model import ForwardModel, GameStatus, MarioActions


# Movement constants (pixels and pixels per tick)
WALK_SPEED = 2.0
RUN_SPEED = 4.0
ACCELERATION = 0.6
FRICTION = 0.85
JUMP_VELOCITY = 8.0
GRAVITY = 0.8
MAX_FALL_SPEED = 10.0


@dataclass(frozen=True)
class LevelLayout:
    """Immutable level geometry shared by every clone of a model"""
    length: float = 400.0
    gaps: Tuple[Tuple[float, float], ...] = ((120.0, 150.0), (250.0, 280.0))
    ground_y: float = 200.0
    kill_y: float = 260.0
    start_x: float = 16.0
    time_limit: int = 600
    goal_x: Optional[float] = None

    def __post_init__(self):
        if self.length <= 0:
            raise ValueError("Level length must be positive")
        if self.kill_y <= self.ground_y:
            raise ValueError("kill_y must lie below ground_y")
        for start, end in self.gaps:
            if end <= start:
                raise ValueError(f"Invalid gap ({start}, {end}): end must exceed start")

    @property
    def finish_x(self) -> float:
        """X coordinate that wins the level"""
        return self.length if self.goal_x is None else self.goal_x

    def is_over_gap(self, x: float) -> bool:
        """Check whether there is no floor under x"""
        return any(start < x < end for start, end in self.gaps)


class LevelForwardModel(ForwardModel):
    """Mutable simulation state over a LevelLayout"""

    def __init__(self, layout: Optional[LevelLayout] = None):
        self.layout = layout or LevelLayout()
        self.x = self.layout.start_x
        self.y = self.layout.ground_y
        self.vx = 0.0
        self.vy = 0.0
        self.on_ground = True
        self.tick = 0
        self.status = GameStatus.RUNNING

    def clone(self) -> "LevelForwardModel":
        copy = LevelForwardModel.__new__(LevelForwardModel)
        copy.layout = self.layout
        copy.x = self.x
        copy.y = self.y
        copy.vx = self.vx
        copy.vy = self.vy
        copy.on_ground = self.on_ground
        copy.tick = self.tick
        copy.status = self.status
        return copy

    def advance(self, action: Sequence[bool]) -> None:
        if self.status != GameStatus.RUNNING:
            return

        left = bool(action[MarioActions.LEFT])
        right = bool(action[MarioActions.RIGHT])
        duck = bool(action[MarioActions.DOWN]) and self.on_ground
        max_speed = RUN_SPEED if action[MarioActions.SPEED] else WALK_SPEED

        # Horizontal motion
        direction = int(right) - int(left)
        if direction != 0 and not duck:
            self.vx = max(-max_speed, min(max_speed, self.vx + direction * ACCELERATION))
        else:
            self.vx *= FRICTION

        # Vertical motion
        if self.on_ground and action[MarioActions.JUMP]:
            self.vy = -JUMP_VELOCITY
        self.vy = min(MAX_FALL_SPEED, self.vy + GRAVITY)

        previous_y = self.y
        self.x = max(0.0, min(self.layout.length, self.x + self.vx))
        self.y += self.vy

        # Land only when coming from above the floor
        ground_y = self.layout.ground_y
        if self.y >= ground_y and previous_y <= ground_y and not self.layout.is_over_gap(self.x):
            self.y = ground_y
            self.vy = 0.0
            self.on_ground = True
        else:
            self.on_ground = False

        self.tick += 1

        if self.y > self.layout.kill_y:
            self.status = GameStatus.LOSE
        elif self.x >= self.layout.finish_x:
            self.status = GameStatus.WIN
        elif self.tick >= self.layout.time_limit:
            self.status = GameStatus.TIME_OUT

    def get_mario_float_pos(self) -> Tuple[float, float]:
        return self.x, self.y

    def get_completion_percentage(self) -> float:
        return self.x / self.layout.length

    def get_game_status(self) -> GameStatus:
        return self.status

    def __repr__(self) -> str:
        return (f"LevelForwardModel(x={self.x:.1f}, y={self.y:.1f}, tick={self.tick}, "
                f"status={self.status.value})")
