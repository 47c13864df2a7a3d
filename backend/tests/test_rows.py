"""Tests for the row layout codec."""
from shiftlog.utils.rows import (
    EQUIPMENT_CHANNELS,
    HEADER_ROW,
    ROW_WIDTH,
    build_row,
    join_electricians,
    log_from_row,
    pad_row,
    shift_key,
)


def test_layout_is_sixteen_columns():
    assert ROW_WIDTH == 16
    assert len(HEADER_ROW) == ROW_WIDTH
    assert EQUIPMENT_CHANNELS[0] == "boiler"
    assert EQUIPMENT_CHANNELS[-1] == "Boiler_12_Ton"


def test_pad_row_short_and_long():
    assert pad_row(["a", None]) == ["a", ""] + [""] * 14
    assert len(pad_row(["x"] * 20)) == ROW_WIDTH


def test_log_from_row_derives_date():
    row = ["02/01/2024 08:00:00", "Ravi Das, Amit Roy", " b ", "Running"]
    log = log_from_row(row)
    assert log.date == "2024-01-02"
    assert log.shift == " b "
    assert log.electrician == "Ravi Das, Amit Roy"
    assert log.equipment_status["boiler"] == "Running"
    assert log.equipment_status["wbsedcl_unit"] == ""
    assert set(log.equipment_status) == set(EQUIPMENT_CHANNELS)


def test_log_matches_is_case_and_space_insensitive_on_shift():
    log = log_from_row(["02/01/2024 08:00:00", "Ravi", " b "])
    assert log.matches("2024-01-02", "B")
    assert not log.matches("2024-01-02", "C")
    assert not log.matches("2024-01-03", "B")


def test_unparseable_timestamp_never_matches():
    log = log_from_row(["pending", "Ravi", "A"])
    assert log.date == ""
    assert not log.matches("", "A")


def test_build_row_orders_channels_and_drops_unknown():
    row = build_row(
        "02/01/2024 08:00:00",
        "Ravi Das",
        "a",
        {"pump": 12, "boiler": "Running", "Boiler_12_Ton": 3.0, "unknown": "x"},
    )
    assert len(row) == ROW_WIDTH
    assert row[:3] == ["02/01/2024 08:00:00", "Ravi Das", "A"]
    assert row[3] == "Running"
    assert row[3 + EQUIPMENT_CHANNELS.index("pump")] == "12"
    assert row[3 + EQUIPMENT_CHANNELS.index("Boiler_12_Ton")] == "3"
    assert "x" not in row


def test_build_row_keeps_zero_readings():
    row = build_row("02/01/2024 08:00:00", "Ravi", "A", {"np": 0})
    assert row[3 + EQUIPMENT_CHANNELS.index("np")] == "0"


def test_join_electricians_skips_blanks():
    assert join_electricians("Ravi Das", "  ") == "Ravi Das"
    assert join_electricians(" Ravi ", "Amit") == "Ravi, Amit"
    assert join_electricians(None, "Amit") == "Amit"


def test_shift_key():
    assert shift_key(" c ") == "C"
    assert shift_key(None) == ""
