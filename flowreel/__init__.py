"""flowreel: seeded procedural particle-field video clips."""
__version__ = "0.1.0"
