import random

import pytest

from conversion.pitch import PITCH_UNITS_PER_SEMITONE, PitchMapper


def test_reference_pitch():
    assert PitchMapper().map(0) == (60, 0)


def test_whole_semitones_have_no_bend():
    m = PitchMapper(2)
    assert m.map(13.75) == (61, 0)
    assert m.map(-13.75) == (59, 0)
    assert m.map(13.75 * 12) == (72, 0)


def test_half_semitone_rounds_up_and_bends_down():
    # 60.5 -> 61 with a quarter of the range below (2 semitone range)
    assert PitchMapper(2).map(6.875) == (61, -2048)


def test_bend_scales_with_range():
    assert PitchMapper(1).map(3.4375) == (60, 2048)
    assert PitchMapper(2).map(3.4375) == (60, 1024)
    assert PitchMapper(12).map(3.4375) == (60, 171)


def test_one_unit_bend_is_treated_as_noise():
    m = PitchMapper(2)
    pitch, bend = m.map(PITCH_UNITS_PER_SEMITONE / 4096)
    assert (pitch, bend) == (60, 0)
    assert m.map(-PITCH_UNITS_PER_SEMITONE / 4096) == (60, 0)
    assert m.map(2 * PITCH_UNITS_PER_SEMITONE / 4096) == (60, 2)


@pytest.mark.parametrize("bend_range", [1, 2, 7, 12, 24])
def test_bend_never_one_and_in_range(bend_range):
    m = PitchMapper(bend_range)
    rng = random.Random(1234)
    for _ in range(2000):
        _, bend = m.map(rng.uniform(-200, 200))
        assert abs(bend) != 1
        assert -8192 <= bend <= 8191


@pytest.mark.parametrize("bad", [0, -2])
def test_invalid_range(bad):
    with pytest.raises(ValueError):
        PitchMapper(bad)
