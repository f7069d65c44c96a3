import pandas as pd
import pytest

from tidyclean.errors import JoinKeyError
from tidyclean.join import join_summary, join_tables, resolve_key_mapping


def players():
    return pd.DataFrame({"id": [1, 2, 3], "name": ["ann", "bob", "cy"]})


def scores():
    return pd.DataFrame({"player_id": [2, 3, 4], "score": [20, 30, 40]})


def test_no_mapping_and_no_shared_column():
    """Fail loudly rather than cross join when nothing lines up."""
    with pytest.raises(JoinKeyError, match="share no column") as exc_info:
        join_tables(players(), scores())
    err = exc_info.value
    assert err.left_columns == ["id", "name"]
    assert err.right_columns == ["player_id", "score"]


def test_inner_join_on_mapping():
    result = join_tables(players(), scores(), on={"id": "player_id"})
    assert list(result.columns) == ["id", "name", "score"]
    assert result["id"].to_list() == [2, 3]
    assert result["score"].to_list() == [20, 30]


def test_left_join_fills_nulls():
    result = join_tables(players(), scores(), on={"id": "player_id"}, how="left")
    assert len(result) == 3
    assert result["id"].to_list() == [1, 2, 3]
    assert pd.isna(result["score"].iloc[0])


def test_right_join():
    result = join_tables(players(), scores(), on={"id": "player_id"}, how="right")
    assert result["id"].to_list() == [2, 3, 4]
    assert pd.isna(result["name"].iloc[2])


def test_full_join():
    result = join_tables(players(), scores(), on={"id": "player_id"}, how="full")
    assert sorted(result["id"].to_list()) == [1, 2, 3, 4]
    assert result["name"].isna().sum() == 1
    assert result["score"].isna().sum() == 1


def test_outer_alias():
    full = join_tables(players(), scores(), on={"id": "player_id"}, how="full")
    outer = join_tables(players(), scores(), on={"id": "player_id"}, how="outer")
    pd.testing.assert_frame_equal(full, outer)


def test_join_row_arithmetic():
    left = pd.DataFrame({"k": [1, 2, 3, 4, 5], "a": range(5)})
    right = pd.DataFrame({"key": [4, 5, 6, 7], "b": range(4)})
    on = {"k": "key"}
    n, m = len(left), len(right)
    common = len(set(left["k"]) & set(right["key"]))

    assert len(join_tables(left, right, on=on, how="inner")) <= min(n, m)
    assert len(join_tables(left, right, on=on, how="left")) == n
    assert len(join_tables(left, right, on=on, how="right")) == m
    assert len(join_tables(left, right, on=on, how="full")) == n + m - common


def test_non_unique_keys_can_grow_rows(caplog):
    left = pd.DataFrame({"id": [1, 1, 2], "a": ["x", "y", "z"]})
    right = pd.DataFrame({"id": [1, 1], "b": ["p", "q"]})
    with caplog.at_level("WARNING", logger="tidyclean.join"):
        result = join_tables(left, right)
    assert len(result) == 4
    assert "repeat a key" in caplog.text


def test_shared_columns_used_by_default():
    left = pd.DataFrame({"id": [1, 2], "a": [1, 2]})
    right = pd.DataFrame({"id": [2, 3], "b": [5, 6]})
    result = join_tables(left, right)
    assert result.to_dict("list") == {"id": [2], "a": [2], "b": [5]}


def test_overlapping_columns_get_suffixes():
    left = pd.DataFrame({"id": [1], "val": [1]})
    right = pd.DataFrame({"id": [1], "val": [2]})
    result = join_tables(left, right, on="id")
    assert list(result.columns) == ["id", "val_x", "val_y"]


def test_missing_key_column():
    with pytest.raises(JoinKeyError, match="not found in right table"):
        join_tables(players(), scores(), on={"id": "pid"})
    with pytest.raises(JoinKeyError, match="not found in left table"):
        join_tables(players(), scores(), on={"pid": "player_id"})


def test_right_key_rename_collision():
    right = pd.DataFrame({"player_id": [1], "id": ["internal"], "score": [3]})
    with pytest.raises(JoinKeyError, match="already has a non-key column"):
        join_tables(players(), right, on={"id": "player_id"})


def test_key_dtype_mismatch():
    right = pd.DataFrame({"player_id": ["1", "2"], "score": [1, 2]})
    with pytest.raises(JoinKeyError, match="key dtypes"):
        join_tables(players(), right, on={"id": "player_id"})


def test_unknown_join_type():
    with pytest.raises(ValueError, match="Unknown join type"):
        join_tables(players(), scores(), on={"id": "player_id"}, how="cross")


def test_resolve_key_mapping_forms():
    left, right = players(), players()
    assert resolve_key_mapping(left, right, "id") == {"id": "id"}
    assert resolve_key_mapping(left, right, ["id", "name"]) == {"id": "id", "name": "name"}
    assert resolve_key_mapping(left, right, None) == {"id": "id", "name": "name"}
    with pytest.raises(JoinKeyError, match="empty"):
        resolve_key_mapping(left, right, {})


def test_join_summary():
    summary = join_summary(players(), scores(), on={"id": "player_id"})
    assert summary == {"matched": 2, "left_only": 1, "right_only": 1}


def null_key_tables():
    left = pd.DataFrame({"k": [1.0, None], "a": ["x", "y"]})
    right = pd.DataFrame({"key": [2.0, None], "b": ["p", "q"]})
    return left, right


def test_null_keys_never_match():
    """Two rows without a key are not the same entity."""
    left, right = null_key_tables()
    on = {"k": "key"}
    assert len(join_tables(left, right, on=on)) == 0
    assert len(join_tables(left, right, on=on, how="left")) == 2
    assert len(join_tables(left, right, on=on, how="right")) == 2

    full = join_tables(left, right, on=on, how="full")
    assert len(full) == 4
    assert list(full.columns) == ["k", "a", "b"]
    assert full["k"].isna().sum() == 2
    assert sorted(full["a"].dropna().to_list()) == ["x", "y"]
    assert sorted(full["b"].dropna().to_list()) == ["p", "q"]


def test_null_key_rows_keep_suffixed_columns():
    left = pd.DataFrame({"id": [1, None], "v": [10, 20]})
    right = pd.DataFrame({"id": [1, None], "v": [30, 40]})
    full = join_tables(left, right, on="id", how="full")
    assert list(full.columns) == ["id", "v_x", "v_y"]
    assert len(full) == 3
    assert sorted(full["v_x"].dropna().to_list()) == [10, 20]
    assert sorted(full["v_y"].dropna().to_list()) == [30, 40]


def test_join_summary_ignores_null_keys():
    left, right = null_key_tables()
    assert join_summary(left, right, on={"k": "key"}) == {
        "matched": 0, "left_only": 1, "right_only": 1}
