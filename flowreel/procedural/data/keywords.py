"""
Our data: keyword → palette, motion, density, lighting and mood hints. Used by the profile builder.
No external model; we define every mapping ourselves.
"""
# Words (lowercase) that suggest a palette name
KEYWORD_TO_PALETTE: dict[str, str] = {
    "sunset": "warm_sunset",
    "sun": "warm_sunset",
    "dusk": "warm_sunset",
    "ocean": "ocean",
    "sea": "ocean",
    "water": "ocean",
    "rain": "ocean",
    "neon": "neon",
    "city": "neon",
    "metropolis": "neon",
    "tokyo": "neon",
    "holographic": "neon",
    "night": "night",
    "dark": "night",
    "black": "night",
    "space": "night",
    "forest": "forest",
    "jungle": "forest",
    "dreamy": "dreamy",
    "dream": "dreamy",
    "fire": "fire",
    "flame": "fire",
    "lava": "fire",
    "white": "mono",
    # Color words
    "blue": "ocean",
    "azure": "ocean",
    "teal": "ocean",
    "green": "forest",
    "orange": "fire",
    "red": "fire",
    "purple": "dreamy",
    "lavender": "dreamy",
    "pink": "dreamy",
    "urban": "neon",
    "cyber": "neon",
    "retro": "neon",
}

# Words that suggest a motion curve
KEYWORD_TO_MOTION: dict[str, str] = {
    "calm": "slow",
    "gentle": "slow",
    "peaceful": "slow",
    "serene": "slow",
    "dreamy": "slow",
    "wave": "wave",
    "waves": "wave",
    "ocean": "wave",
    "sea": "wave",
    "rain": "wave",
    "flow": "flow",
    "drift": "flow",
    "fluid": "flow",
    "smooth": "flow",
    "gliding": "flow",
    "fast": "fast",
    "quick": "fast",
    "chaotic": "fast",
    "intense": "fast",
    "torrential": "fast",
    "storm": "fast",
    "pulse": "pulse",
    "rhythmic": "pulse",
    "erratic": "pulse",
    "neon": "pulse",
    "city": "pulse",
}

# Words that suggest particle density (0–1)
KEYWORD_TO_DENSITY: dict[str, float] = {
    "sparse": 0.15,
    "minimal": 0.2,
    "calm": 0.3,
    "subtle": 0.3,
    "vast": 0.65,
    "crowded": 0.85,
    "dense": 0.9,
    "torrential": 0.95,
    "swarm": 1.0,
}

KEYWORD_TO_LIGHTING: dict[str, str] = {
    "noir": "noir",
    "dark": "noir",
    "dim": "noir",
    "golden": "golden hour",
    "sunset": "golden hour",
    "warm": "golden hour",
    "neon": "neon glow",
    "holographic": "neon glow",
    "volumetric": "volumetric",
    "fog": "volumetric",
    "mist": "volumetric",
    "bright": "daylight",
    "natural": "daylight",
}

KEYWORD_TO_MOOD: dict[str, str] = {
    "nostalgic": "nostalgic",
    "melancholic": "melancholic",
    "hopeful": "hopeful",
    "serene": "serene",
    "calm": "serene",
    "uplifting": "uplifting",
    "eerie": "eerie",
    "mysterious": "mysterious",
    "epic": "epic",
    "vast": "epic",
    "torrential": "tense",
    "storm": "tense",
    "dreamy": "dreamlike",
}

DEFAULT_PALETTE = "default"
DEFAULT_MOTION = "flow"
