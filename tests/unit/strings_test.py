import pandas as pd
import pytest

from tidyclean.errors import ColumnNameError
from tidyclean.strings import clean_strings, coerce_missing, normalize_whitespace, replace_values


def test_normalize_whitespace():
    assert normalize_whitespace("  Ann\u200b  Lee\xa0 ") == "Ann Lee"
    assert normalize_whitespace("Cafe\u0301") == "Caf\u00e9"
    assert normalize_whitespace(3) == 3
    assert normalize_whitespace(None) is None


def test_clean_strings_all_text_columns():
    df = pd.DataFrame({"name": ["  ann  ", "BOB\t lee"], "n": [1, 2]})
    result = clean_strings(df, case="title")
    assert result["name"].to_list() == ["Ann", "Bob Lee"]
    assert result["n"].to_list() == [1, 2]


def test_clean_strings_categorical():
    df = pd.DataFrame({"team": pd.Categorical([" red", "red ", "blue"])})
    result = clean_strings(df, ["team"], case="upper")
    assert isinstance(result["team"].dtype, pd.CategoricalDtype)
    assert sorted(result["team"].cat.categories) == ["BLUE", "RED"]


def test_clean_strings_bad_case():
    with pytest.raises(ValueError, match="Unknown case"):
        clean_strings(pd.DataFrame({"a": ["x"]}), case="snake")


def test_clean_strings_missing_column():
    with pytest.raises(ColumnNameError):
        clean_strings(pd.DataFrame({"a": ["x"]}), ["b"])


def test_coerce_missing():
    df = pd.DataFrame({"v": ["1", "N/A", " null ", "--", "7"]})
    result = coerce_missing(df)
    assert result["v"].isna().to_list() == [False, True, True, True, False]


def test_coerce_missing_custom_tokens():
    df = pd.DataFrame({"v": ["1", "N/A", "?"]})
    result = coerce_missing(df, ["v"], tokens={"?"})
    assert result["v"].to_list()[:2] == ["1", "N/A"]
    assert pd.isna(result["v"].iloc[2])


def test_replace_values():
    df = pd.DataFrame({"team": ["R", "B", "R"]})
    result = replace_values(df, "team", {"R": "red", "B": "blue"})
    assert result["team"].to_list() == ["red", "blue", "red"]
