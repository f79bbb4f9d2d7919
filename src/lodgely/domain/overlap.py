"""Overlap predicate for closed date intervals.

Touching endpoints count as an overlap: a stay ending 2024-06-10 and one
starting 2024-06-10 collide. This matches daterange(start, end, '[]') && ...
in Postgres.
"""

from lodgely.domain.intervals import DateInterval


def overlaps(a: DateInterval, b: DateInterval) -> bool:
    """Return True if the two closed intervals share at least one day."""
    return a.start <= b.end and b.start <= a.end
