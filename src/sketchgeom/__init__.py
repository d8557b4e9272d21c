"""Hand-drawn (sketchy) geometry engine.

Turns diagram elements into jittered, multi-pass stroke geometry
that looks like it was drawn with a slightly unsteady pen.
Jitter is seeded per element so the same input always produces
the same output.

The engine produces sink-neutral geometry (paths made of geom2d
lines and cubic Bezier curves, or typed draw primitives).
An SVG writer is included as one consumer.
"""

import importlib.metadata

__version__ = importlib.metadata.version('utl-sketchgeom')
