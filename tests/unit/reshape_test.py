import pandas as pd
import pytest

from tidyclean.errors import ColumnNameError
from tidyclean.reshape import long_to_wide, wide_to_long


def rounds_df():
    return pd.DataFrame({
        "Round": [1, 2],
        "PlayerA": [10.5, 11.0],
        "PlayerB": [12.25, 9.75],
    })


def test_rounds_to_tidy():
    """[Round, PlayerA, PlayerB] x 2 rows -> [Round, Player, Time] x 4 rows."""
    tall = wide_to_long(rounds_df(), "Round", names_to="Player", values_to="Time")

    expected = pd.DataFrame({
        "Round": [1, 1, 2, 2],
        "Player": ["PlayerA", "PlayerB", "PlayerA", "PlayerB"],
        "Time": [10.5, 12.25, 11.0, 9.75],
    })
    assert list(tall.columns) == ["Round", "Player", "Time"]
    pd.testing.assert_frame_equal(tall, expected, check_dtype=False)


def test_cells_match_original_positions():
    wide = rounds_df()
    tall = wide_to_long(wide, "Round", names_to="Player", values_to="Time")
    for row in tall.itertuples(index=False):
        original = wide.loc[wide["Round"] == row.Round, row.Player].iloc[0]
        assert original == row.Time


def test_round_trip():
    wide = rounds_df()
    tall = wide_to_long(wide, "Round", names_to="Player", values_to="Time")
    back = long_to_wide(tall, "Round", names_from="Player", values_from="Time")

    pd.testing.assert_frame_equal(back, wide)


def test_round_trip_multiple_ids():
    wide = pd.DataFrame({
        "site": ["a", "a", "b"],
        "year": [2001, 2002, 2001],
        "x": [1, 2, 3],
        "y": [4, 5, 6],
    })
    tall = wide_to_long(wide, ["site", "year"])
    assert len(tall) == 6
    assert list(tall.columns) == ["site", "year", "name", "value"]

    back = long_to_wide(tall, ["site", "year"])
    pd.testing.assert_frame_equal(back, wide)


def test_round_trip_up_to_order():
    tall = pd.DataFrame({
        "id": [2, 1, 2, 1],
        "name": ["q", "q", "p", "p"],
        "value": [1, 2, 3, 4],
    })
    wide = long_to_wide(tall, "id")
    assert list(wide.columns) == ["id", "q", "p"]
    assert wide["id"].to_list() == [2, 1]

    again = wide_to_long(wide, "id")
    key = ["id", "name"]
    pd.testing.assert_frame_equal(
        again.sort_values(key).reset_index(drop=True),
        tall.sort_values(key).reset_index(drop=True))


def test_value_columns_subset():
    df = pd.DataFrame({"Round": [1], "PlayerA": [1], "PlayerB": [2], "Notes": ["x"]})
    tall = wide_to_long(df, "Round", value_columns=["PlayerA", "PlayerB"])
    assert list(tall.columns) == ["Round", "name", "value"]
    assert tall["name"].to_list() == ["PlayerA", "PlayerB"]


def test_wide_to_long_missing_column():
    with pytest.raises(ColumnNameError, match="'Lap'"):
        wide_to_long(rounds_df(), "Lap")


def test_wide_to_long_output_collides_with_id():
    with pytest.raises(ColumnNameError, match="collides"):
        wide_to_long(rounds_df(), "Round", names_to="Round")


def test_wide_to_long_nothing_to_gather():
    with pytest.raises(ColumnNameError, match="No value columns"):
        wide_to_long(rounds_df(), ["Round", "PlayerA", "PlayerB"])


def test_long_to_wide_duplicate_cells():
    tall = pd.DataFrame({"id": [1, 1], "name": ["a", "a"], "value": [1, 2]})
    with pytest.raises(ValueError, match="1 rows repeat"):
        long_to_wide(tall, "id")
