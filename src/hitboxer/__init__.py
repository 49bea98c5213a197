"""Hitboxer - Derive convex collision polygons from sprite sheets.

Hitboxer is a CLI tool that traces the visible silhouette of every sprite in a
sprite sheet and turns it into collision geometry: a simplified outline, a
convex hull, or a small set of convex polygons produced by Bayazit's fast
approximate convex decomposition. Each shape is computed at three accuracy
tiers (low, mid, high).

Example:
    $ hitboxer img/asteroid4_32x32.png -W 32 -H 32 -g 5 -n 19

This will create img/meta/asteroid4_32x32-decomposition-meta.json with the
convex polygons of all 19 sprites at every accuracy tier.
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
