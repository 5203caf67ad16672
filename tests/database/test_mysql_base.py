from __future__ import annotations

from datetime import time, timedelta
from decimal import Decimal

import pytest

from academic_planning.database.mysql_base import float_or_none, int_or_none, set_clause, to_time


def test_set_clause_keeps_payload_order():
    sql, params = set_clause({"name": "A", "active": 1}, ("active", "name", "year"))

    assert sql == "name=%s, active=%s"
    assert params == ["A", 1]


def test_set_clause_refuses_unknown_columns():
    with pytest.raises(KeyError):
        set_clause({"password_hash": "x"}, ("name",))


@pytest.mark.parametrize(
    "raw",
    [time(8, 30), timedelta(hours=8, minutes=30), "08:30:00", "08:30"],
)
def test_to_time_accepts_driver_shapes(raw):
    assert to_time(raw) == time(8, 30)


def test_to_time_none_and_garbage():
    assert to_time(None) is None
    with pytest.raises(TypeError):
        to_time(830)


def test_numeric_converters_keep_none():
    assert float_or_none(Decimal("12.50")) == 12.5
    assert float_or_none(None) is None
    assert int_or_none("7") == 7
    assert int_or_none(None) is None
