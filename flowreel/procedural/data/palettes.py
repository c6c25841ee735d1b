"""
Our data: color palettes (CSS hex). Background stops feed the gradient; accents color the particles.
No external model; we define every palette ourselves.
"""
# name → (background stops, accents)
PALETTES: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "warm_sunset": (
        ("#643c64", "#b43c78", "#ff7850"),
        ("#ff5064", "#ffb46e", "#ffd6a0"),
    ),
    "ocean": (
        ("#0a2846", "#14508c", "#2878b4"),
        ("#50a0dc", "#8cc8f0", "#d2f0ff"),
    ),
    "neon": (
        ("#0a0a1e", "#1e0a3c", "#3c0a5a"),
        ("#ff0080", "#8000ff", "#00ffff", "#ffff00"),
    ),
    "forest": (
        ("#0a2814", "#145028", "#287840"),
        ("#508c5a", "#78a064", "#c8e6a0"),
    ),
    "night": (
        ("#0a0a1e", "#1e143c", "#3c2864"),
        ("#64508c", "#a08cd2", "#f0e6ff"),
    ),
    "dreamy": (
        ("#b4a0dc", "#c8b4f0", "#dcc8ff"),
        ("#fff0ff", "#ffc8e6", "#a0dcff"),
    ),
    "fire": (
        ("#140502", "#640f05", "#c83c0a"),
        ("#ff7814", "#ffc832", "#fff0b4"),
    ),
    "mono": (
        ("#141414", "#282828", "#646464"),
        ("#b4b4b4", "#f0f0f0"),
    ),
    "default": (
        ("#1e1e32", "#3c3c50", "#64648c"),
        ("#8c8cb4", "#c8c8dc", "#f0d2ff"),
    ),
}
