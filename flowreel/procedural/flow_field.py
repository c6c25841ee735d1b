"""
Flow field: the particle set and gradient stops derived once per generation.
Fully determined by the seed and the scene profile; per-frame positions are derived, never stored.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from ..random_utils import SeededRandom
from .schema import GenerationSettings, SceneProfile

BASE_PARTICLES = 180
DENSITY_PARTICLES = 220


@dataclass(frozen=True)
class Particle:
    id: int
    radius: float
    base_x: float  # normalized 0-1
    base_y: float
    depth: float   # 0.2-1.0, near = 1
    hue: str       # accent color
    drift: float
    noise: float


@dataclass(frozen=True)
class FlowField:
    particles: tuple[Particle, ...]
    gradient_stops: tuple[str, ...]


def particle_count(density: float) -> int:
    return int(math.floor(BASE_PARTICLES + density * DENSITY_PARTICLES))


def build_flow_field(settings: GenerationSettings, profile: SceneProfile) -> FlowField:
    """
    Build the particle set from one seeded stream. Draw order per particle is fixed:
    radius, x, y, depth, hue index, drift, noise. Accents must be non-empty.
    """
    rand = SeededRandom(settings.seed)
    motion = profile.motion
    accents = profile.palette.accents
    particles = []
    for i in range(particle_count(profile.density)):
        radius = 1.4 + rand() * (6 + motion.amplitude * 12)
        base_x = rand()
        base_y = rand()
        depth = 0.2 + rand() * 0.8
        hue = accents[int(math.floor(rand() * len(accents)))]
        drift = (rand() - 0.5) * motion.drift * 2.4
        noise = rand()
        particles.append(
            Particle(
                id=i,
                radius=radius,
                base_x=base_x,
                base_y=base_y,
                depth=depth,
                hue=hue,
                drift=drift,
                noise=noise,
            )
        )
    return FlowField(particles=tuple(particles), gradient_stops=tuple(profile.palette.background))
