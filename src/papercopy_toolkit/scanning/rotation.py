"""
Module: scanning.rotation

Purpose:
    Estimate how far a scanned page must be rotated (clockwise) to be
    upright, from the position of one barcode on it. Two layouts are
    supported:

    - Corner codes (QR): printed near a page corner; the quadrant the code
      lands in selects the rotation.
    - Top-center codes (linear): printed centered along the upright top
      edge; the nearest page edge selects the rotation.

Key Functions:
    - rotation_from_corner_quadrant()
    - rotation_from_edge_proximity()

Dependencies:
    - typing (std)
    - core.models.barcodes.centroid

Used By:
    - scanning.resolver.resolve_page
"""

from __future__ import annotations

from typing import Sequence, Tuple

from papercopy_toolkit.core.models.barcodes import centroid

Location = Sequence[Tuple[int, int]]


def rotation_from_corner_quadrant(width: int, height: int, location: Location) -> int:
    """
    Rotation from the quadrant holding a corner code's centroid.

    Page centers use integer division. Points on a center line fall to the
    branch shown below (left < h_center, top > v_center):

        yes, yes -> 0
        yes, no  -> 90
        no,  no  -> 180
        no,  yes -> 270

    Args:
        width: Page width in pixels
        height: Page height in pixels
        location: Barcode polygon points (x, y)

    Returns:
        One of 0, 90, 180, 270
    """
    left, top = centroid(location)
    h_center = width // 2
    v_center = height // 2

    if left < h_center and top > v_center:
        return 0
    if left < h_center and top <= v_center:
        return 90
    if left >= h_center and top <= v_center:
        return 180
    return 270


def rotation_from_edge_proximity(width: int, height: int, location: Location) -> int:
    """
    Rotation that brings the edge nearest a top-center code to the top.

    Distances are measured from the centroid to each edge. Ties go to the
    first of top, left, bottom, right.

    Args:
        width: Page width in pixels
        height: Page height in pixels
        location: Barcode polygon points (x, y)

    Returns:
        One of 0, 90, 180, 270
    """
    left, top = centroid(location)
    bottom = height - top
    right = width - left

    # min() keeps the first of equal keys
    candidates = ((top, 0), (left, 90), (bottom, 180), (right, 270))
    _, rotation = min(candidates, key=lambda candidate: candidate[0])
    return rotation
