"""Mapping of laid-out graphs to drawable primitives."""

from flowsketch.visualization.shape_mapper import (
    COLOR_BY_TYPE,
    GEOMETRY_BY_TYPE,
    color_for,
    geometry_for,
)
from flowsketch.visualization.shape_synthesizer import (
    ShapeSynthesizer,
    face_midpoint,
    new_shape_id,
    synthesize,
)

__all__ = [
    "GEOMETRY_BY_TYPE",
    "COLOR_BY_TYPE",
    "geometry_for",
    "color_for",
    "ShapeSynthesizer",
    "face_midpoint",
    "new_shape_id",
    "synthesize",
]
