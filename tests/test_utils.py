from icbm_sim import utils


def test_format_duration_seconds_unchanged():
    assert utils.format_duration(42.123456) == (42.123456, 'seconds')
    assert utils.format_duration(0.0) == (0.0, 'seconds')

def test_format_duration_minutes():
    assert utils.format_duration(90.0) == (1.5, 'min')
    assert utils.format_duration(60.0) == (1.0, 'min')

def test_format_duration_hours():
    assert utils.format_duration(5400.0) == (1.5, 'hr')

def test_format_duration_days():
    assert utils.format_duration(2 * 86400.0) == (2.0, 'day')

def test_format_duration_rounds_to_two_decimals():
    value, unit = utils.format_duration(100.0)
    assert unit == 'min'
    assert value == 1.67

def test_format_duration_str():
    assert utils.format_duration_str(90.0) == "1.5 min"
    assert utils.format_duration_str(30.0) == "30 seconds"
