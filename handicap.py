"""
Handicap Calculator
Course handicaps, handicap display modes and per-hole stroke allocation
"""

import logging
import math

import config
from errors import ConfigError

logger = logging.getLogger(__name__)


def round_half_up(value):
    """Round to the nearest integer, halves away from zero for positives (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def net_score(gross, strokes_on_hole):
    return gross - strokes_on_hole


def gross_score(net, strokes_on_hole):
    return net + strokes_on_hole


class HandicapCalculator:
    def __init__(self, max_strokes_per_hole=config.MAX_STROKES_PER_HOLE):
        self.max_strokes_per_hole = max_strokes_per_hole

    def calculate_course_handicap(self, handicap_index, slope_rating=config.NEUTRAL_SLOPE):
        """
        Course Handicap = Handicap Index × (Slope Rating / 113)

        Always a non-negative integer; a missing index plays off scratch.
        """
        if not handicap_index:
            return 0
        slope = slope_rating or config.NEUTRAL_SLOPE
        ch = round_half_up(float(handicap_index) * slope / config.NEUTRAL_SLOPE)
        return max(0, ch)

    def calculate_display_handicaps(self, course_handicaps, mode='gross'):
        """
        Apply a handicap mode to a round's course handicaps.

        Args:
            course_handicaps: dict of player id -> course handicap
            mode: 'none' (everyone scratch), 'gross' (full course handicap) or
                  'net' (strokes relative to the lowest handicap in the round)

        Returns:
            Tuple of (dict of player id -> display handicap, lowest handicap)
        """
        if mode == 'none':
            return {pid: 0 for pid in course_handicaps}, 0
        if mode == 'gross':
            return dict(course_handicaps), 0
        if mode == 'net':
            values = [h for h in course_handicaps.values() if h >= 0]
            lowest = min(values) if values else 0
            return {pid: max(0, ch - lowest) for pid, ch in course_handicaps.items()}, lowest
        raise ConfigError(f"Unknown handicap mode '{mode}'", {'allowed': list(config.HANDICAP_MODES)})

    def build_stroke_allocation_map(self, course_handicap, holes):
        """
        Fair allocation: hardest non-par-3s first, then par-3s, one stroke per
        hole per pass until the handicap is used up.

        Args:
            course_handicap: Strokes to distribute
            holes: List of Hole records

        Returns:
            Dict of hole number -> strokes received on that hole
        """
        if not holes:
            return {}

        stroke_map = {h.number: 0 for h in holes}
        if course_handicap <= 0:
            return stroke_map

        def rating(hole):
            return hole.handicap_rating or config.MISSING_RATING_PRIORITY

        non_par3s = sorted((h for h in holes if h.par != 3), key=rating)
        par3s = sorted((h for h in holes if h.par == 3), key=rating)
        allocation_order = non_par3s + par3s

        strokes_remaining = course_handicap
        passes = 0
        while strokes_remaining > 0 and passes < self.max_strokes_per_hole:
            for hole in allocation_order:
                if strokes_remaining <= 0:
                    break
                stroke_map[hole.number] += 1
                strokes_remaining -= 1
            passes += 1

        if strokes_remaining > 0:
            logger.debug(
                "Handicap %s exceeds %s strokes per hole; %s strokes not allocated",
                course_handicap, self.max_strokes_per_hole, strokes_remaining,
            )

        return stroke_map

    def simple_strokes_on_hole(self, course_handicap, hole):
        """
        Strokes on one hole without the full hole list:
        floor(CH / 18) plus one more where the rating is within CH mod 18.
        Par 3s never receive a stroke under this formula.
        """
        if course_handicap <= 0 or hole.par == 3:
            return 0
        rating = hole.handicap_rating or hole.number
        full_strokes, remaining = divmod(course_handicap, 18)
        return full_strokes + (1 if rating <= remaining else 0)

    def calculate_scramble_handicap(self, handicaps):
        """
        Team handicap for a scramble, weighted toward the lowest handicaps:
        35% for one player, 25/15 for two, 20/15/10 for three, 20/15/10/5 for four or more.
        """
        if not handicaps:
            return 0
        ordered = sorted(handicaps)
        if len(ordered) == 1:
            weights = [0.35]
        elif len(ordered) == 2:
            weights = [0.25, 0.15]
        elif len(ordered) == 3:
            weights = [0.20, 0.15, 0.10]
        else:
            weights = [0.20, 0.15, 0.10, 0.05]
        return round_half_up(sum(h * w for h, w in zip(ordered, weights)))

    def calculate_round_handicaps(self, players, slope_rating, mode):
        """
        Course and display handicaps for every player in a round.

        Returns:
            Tuple of (course handicaps, display handicaps, lowest handicap)
        """
        course_handicaps = {
            p.id: self.calculate_course_handicap(p.handicap_index, slope_rating)
            for p in players
        }
        display, lowest = self.calculate_display_handicaps(course_handicaps, mode)
        return course_handicaps, display, lowest
