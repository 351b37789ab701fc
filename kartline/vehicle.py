from dataclasses import dataclass, field, replace

# Centralized kart defaults (typical rental kart with driver)
PHYSICS_DEFAULTS = {
    "grip": 1.0,
    "gravity": 9.81,
    "max_acceleration": 8.0,
    "max_braking": 10.0,
    "max_speed_kmh": 70.0,
    "weight_kg": 180.0,
}

GRIP_MIN = 0.6
GRIP_MAX = 1.5
GRAVITY = 9.81


def clamp_grip(value: float) -> float:
    return max(GRIP_MIN, min(GRIP_MAX, float(value)))


@dataclass(frozen=True)
class PhysicsConfig:
    """Kart and tire parameters shared by the speed model and the optimizer.

    Frozen: every optimization run works on one snapshot, edits produce a
    new instance through :meth:`with_grip` or :meth:`with_updates`.
    """

    grip: float = PHYSICS_DEFAULTS["grip"]
    max_acceleration: float = PHYSICS_DEFAULTS["max_acceleration"]  # m/s^2
    max_braking: float = PHYSICS_DEFAULTS["max_braking"]  # m/s^2
    max_speed_kmh: float = PHYSICS_DEFAULTS["max_speed_kmh"]
    weight_kg: float = PHYSICS_DEFAULTS["weight_kg"]
    gravity: float = field(default=GRAVITY, init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "grip", clamp_grip(self.grip))
        if self.max_acceleration <= 0 or self.max_braking <= 0:
            raise ValueError("max_acceleration and max_braking must be positive")
        if self.max_speed_kmh <= 0:
            raise ValueError("max_speed_kmh must be positive")

    @property
    def max_speed(self) -> float:
        """Top speed cap in m/s."""
        return self.max_speed_kmh / 3.6

    def with_grip(self, grip: float) -> "PhysicsConfig":
        return replace(self, grip=clamp_grip(grip))

    def with_updates(self, **changes) -> "PhysicsConfig":
        allowed = {"grip", "max_acceleration", "max_braking", "max_speed_kmh", "weight_kg"}
        unknown = set(changes) - allowed
        if unknown:
            raise TypeError(f"Unknown physics parameters: {sorted(unknown)}")
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def to_dict(self) -> dict:
        return {
            "grip": self.grip,
            "gravity": self.gravity,
            "max_acceleration": self.max_acceleration,
            "max_braking": self.max_braking,
            "max_speed_kmh": self.max_speed_kmh,
            "weight_kg": self.weight_kg,
        }
