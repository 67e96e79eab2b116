import pytest

from errors import ConfigError
from handicap import HandicapCalculator, gross_score, net_score, round_half_up
from models import Hole


@pytest.fixture()
def calc():
    return HandicapCalculator()


def test_course_handicap_neutral_slope(calc):
    assert calc.calculate_course_handicap(10.0, 113) == 10


def test_course_handicap_rounds_half_up(calc):
    # 12.5 * 113 / 113 = 12.5 -> 13
    assert calc.calculate_course_handicap(12.5, 113) == 13
    # 10.4 * 130 / 113 = 11.96 -> 12
    assert calc.calculate_course_handicap(10.4, 130) == 12


def test_course_handicap_missing_index_is_scratch(calc):
    assert calc.calculate_course_handicap(None, 125) == 0
    assert calc.calculate_course_handicap(0, 125) == 0


def test_course_handicap_never_negative(calc):
    assert calc.calculate_course_handicap(-2.0, 113) == 0


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2


def test_display_handicaps_modes(calc):
    course = {1: 10, 2: 4, 3: 18}

    assert calc.calculate_display_handicaps(course, 'gross') == ({1: 10, 2: 4, 3: 18}, 0)
    assert calc.calculate_display_handicaps(course, 'none') == ({1: 0, 2: 0, 3: 0}, 0)
    assert calc.calculate_display_handicaps(course, 'net') == ({1: 6, 2: 0, 3: 14}, 4)


def test_display_handicaps_unknown_mode(calc):
    with pytest.raises(ConfigError):
        calc.calculate_display_handicaps({1: 10}, 'sliding')


def test_allocation_handicap_ten(calc, holes):
    stroke_map = calc.build_stroke_allocation_map(10, holes)

    # the ten hardest non-par-3 holes by rating each get one stroke
    assert {h for h, s in stroke_map.items() if s == 1} == {4, 11, 2, 13, 6, 15, 1, 10, 8, 17}
    assert all(s in (0, 1) for s in stroke_map.values())
    for par3 in (3, 7, 12, 16):
        assert stroke_map[par3] == 0


def test_allocation_reaches_par3s_after_non_par3s(calc, holes):
    stroke_map = calc.build_stroke_allocation_map(15, holes)

    assert stroke_map[3] == 1
    assert stroke_map[7] == 0
    assert sum(stroke_map.values()) == 15


def test_allocation_second_pass_starts_from_hardest(calc, holes):
    stroke_map = calc.build_stroke_allocation_map(20, holes)

    assert stroke_map[4] == 2
    assert stroke_map[11] == 2
    assert stroke_map[2] == 1
    assert stroke_map[16] == 1


@pytest.mark.parametrize('handicap', [0, 1, 9, 18, 19, 36, 54, 72, 90, 95, 120])
def test_allocation_totals_and_cap(calc, holes, handicap):
    stroke_map = calc.build_stroke_allocation_map(handicap, holes)

    assert sum(stroke_map.values()) == min(handicap, 90)
    assert max(stroke_map.values()) <= 5


@pytest.mark.parametrize('handicap', [5, 14, 23, 40])
def test_allocation_is_monotone_by_rating(calc, holes, handicap):
    stroke_map = calc.build_stroke_allocation_map(handicap, holes)

    non_par3 = sorted((h for h in holes if h.par != 3), key=lambda h: h.handicap_rating)
    par3 = sorted((h for h in holes if h.par == 3), key=lambda h: h.handicap_rating)
    for ordered in (non_par3, par3):
        strokes = [stroke_map[h.number] for h in ordered]
        assert strokes == sorted(strokes, reverse=True)
    # a par 3 never gets more than any non-par-3
    assert max(stroke_map[h.number] for h in par3) <= min(stroke_map[h.number] for h in non_par3)


def test_allocation_edge_cases(calc, holes):
    assert calc.build_stroke_allocation_map(10, []) == {}
    assert calc.build_stroke_allocation_map(-3, holes) == {n: 0 for n in range(1, 19)}


def test_allocation_missing_rating_goes_last(calc):
    holes = [Hole(1, 4, None), Hole(2, 4, 1), Hole(3, 4, 2)]
    assert calc.build_stroke_allocation_map(2, holes) == {1: 0, 2: 1, 3: 1}


def test_simple_formula_skips_par3s(calc, holes):
    by_number = {h.number: h for h in holes}

    assert calc.simple_strokes_on_hole(18, by_number[3]) == 0
    assert calc.simple_strokes_on_hole(18, by_number[4]) == 1
    assert calc.simple_strokes_on_hole(20, by_number[4]) == 2
    assert calc.simple_strokes_on_hole(20, by_number[11]) == 2
    assert calc.simple_strokes_on_hole(20, by_number[2]) == 1
    assert calc.simple_strokes_on_hole(0, by_number[4]) == 0


def test_simple_formula_missing_rating_uses_hole_number(calc):
    assert calc.simple_strokes_on_hole(5, Hole(5, 4, None)) == 1
    assert calc.simple_strokes_on_hole(5, Hole(6, 4, None)) == 0


def test_scramble_handicap_weights(calc):
    assert calc.calculate_scramble_handicap([]) == 0
    assert calc.calculate_scramble_handicap([20]) == 7
    assert calc.calculate_scramble_handicap([20, 10]) == 6
    assert calc.calculate_scramble_handicap([30, 20, 10]) == 8
    assert calc.calculate_scramble_handicap([40, 30, 20, 10]) == 10


def test_net_and_gross_round_trip():
    assert net_score(6, 2) == 4
    assert gross_score(net_score(6, 2), 2) == 6
