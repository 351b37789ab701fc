from .profile import (
    Segment,
    acceleration_distance,
    apply_speed_profile,
    braking_distance,
    build_segments,
    can_maintain_speed,
    compute_speed_profile,
    estimate_lap_time,
    lateral_g_force,
    max_corner_speed,
    speed_kmh,
)

__all__ = [
    "Segment",
    "acceleration_distance",
    "apply_speed_profile",
    "braking_distance",
    "build_segments",
    "can_maintain_speed",
    "compute_speed_profile",
    "estimate_lap_time",
    "lateral_g_force",
    "max_corner_speed",
    "speed_kmh",
]
