"""
isotactics – isometric tile grid, picking, reachability and path-following.

The spatial core (pos, coords, grid, pathing, picking, simulation) has no
pygame dependency; the systems package adds input and rendering. See app.py
for the entrypoint.
"""
__all__ = [
    "app",
    "components",
    "constants",
    "coords",
    "errors",
    "events",
    "grid",
    "pathing",
    "picking",
    "pos",
    "simulation",
    "world",
]
