import pathlib
import sys

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from dinner_table_match.models import Guest
from dinner_table_match.utils import group_by_table, next_table_label, table_counts, table_number


def test_table_number():
    assert table_number("Table-3") == 3
    assert table_number("34-2") == 2
    assert table_number("Table-x") == 0
    assert table_number("Patio") == 0


def test_next_table_label():
    assert next_table_label([]) == "Table-1"
    assert next_table_label(["Table-2", "Table-7", "Patio"]) == "Table-8"


def test_group_by_table_orders_by_number_and_skips_unassigned():
    guests = [
        Guest("a", 30, table="Table-10"),
        Guest("b", 31, table="Table-2"),
        Guest("c", 32),
        Guest("d", 33, table="Table-2"),
    ]
    groups = group_by_table(guests)
    assert list(groups) == ["Table-2", "Table-10"]
    assert [g.name for g in groups["Table-2"]] == ["b", "d"]
    assert isinstance(groups["Table-2"], tuple)
    assert table_counts(guests) == {"Table-2": 2, "Table-10": 1}
