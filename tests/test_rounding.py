from planning_engine.rounding import percentage, round_half_up


def test_round_half_up_differs_from_bankers_rounding():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(12.5) == 13
    assert round_half_up(12.49) == 12
    assert isinstance(round_half_up(3.0), int)


def test_round_to_one_decimal():
    assert round_half_up(4.25, 1) == 4.3
    assert round_half_up(6.5, 1) == 6.5


def test_percentage():
    assert percentage(1, 8) == 13
    assert percentage(2, 3) == 67
    assert percentage(5, 0) == 0
    assert percentage(0, 0) == 0
