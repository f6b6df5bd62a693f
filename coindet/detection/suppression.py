"""Duplicate suppression for overlapping circle candidates."""

from typing import List, Sequence

from coindet.geometry.circle import Circle, circles_overlap


def suppress_duplicates(candidates: Sequence[Circle]) -> List[Circle]:
    """
    Drop the smaller of every overlapping candidate pair.

    Two circles overlap when their centers are closer than half the smaller
    radius. Equal radii keep the earlier candidate. A candidate that has lost
    to a later one still removes smaller overlapping candidates after it.
    Survivors keep their input order.

    Args:
        candidates: Circles in search order

    Returns:
        New list of surviving circles
    """
    keep = [True] * len(candidates)
    for i in range(len(candidates)):
        if not keep[i]:
            continue
        for j in range(i + 1, len(candidates)):
            if not keep[j]:
                continue
            if circles_overlap(candidates[i], candidates[j]):
                if candidates[i].radius >= candidates[j].radius:
                    keep[j] = False
                else:
                    keep[i] = False
    return [c for c, k in zip(candidates, keep) if k]
