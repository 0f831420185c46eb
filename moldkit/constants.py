"""Scale constants shared by the measurement and export layers.

Geometry primitives work in pixels only; these constants are applied when a
value has to be related to physical paper.
"""

# CSS reference density: 96 dots per inch, 2.54 cm per inch.
PX_PER_CM = 37.7952755906
PX_PER_MM = PX_PER_CM / 10
PX_PER_IN = 96.0

__all__ = [
    "PX_PER_CM",
    "PX_PER_MM",
    "PX_PER_IN",
]
