import numpy as np
import pandas as pd
import pytest

from expression_pipeline.transforms import add_direction, classify_direction, derive, filter_rows, filter_significant


def _results():
    return pd.DataFrame({
        "gene_id": ["g1", "g2", "g3", "g4", "g5"],
        "log2_fold_change": [1.5, -0.5, 0.0, 2.0, -1.0],
        "adjusted_p_value": [0.01, 0.2, np.nan, 0.049, 0.05],
    })


def test_filter_significant_counts():
    result = filter_significant(_results(), alpha=0.05)
    assert result.table["gene_id"].tolist() == ["g1", "g4"]
    assert (result.n_passed, result.n_failed, result.n_undefined) == (2, 2, 1)


def test_filtered_rows_satisfy_predicate():
    table = _results()
    predicate = lambda values: values < 0.05  # noqa: E731
    result = filter_rows(table, "adjusted_p_value", predicate)
    kept = result.table
    assert kept["adjusted_p_value"].notna().all()
    assert predicate(kept["adjusted_p_value"]).all()
    excluded = table[~table["gene_id"].isin(kept["gene_id"])]
    for value in excluded["adjusted_p_value"]:
        assert pd.isna(value) or not predicate(pd.Series([value])).iloc[0]


def test_missing_values_never_reach_predicate():
    seen = []

    def predicate(values):
        seen.extend(values.tolist())
        return values > 0

    filter_rows(_results(), "adjusted_p_value", predicate)
    assert not any(pd.isna(v) for v in seen)
    assert len(seen) == 4


def test_filter_on_all_missing_column():
    table = pd.DataFrame({"gene_id": ["g1"], "adjusted_p_value": [np.nan]})
    result = filter_significant(table)
    assert result.table.empty
    assert result.n_undefined == 1


def test_filter_rejects_bad_alpha():
    with pytest.raises(ValueError):
        filter_significant(_results(), alpha=0)


def test_derive_appends_column():
    table = _results()
    out = derive(table, "abs_lfc", lambda row: abs(row["log2_fold_change"]))
    assert list(out.columns) == list(table.columns) + ["abs_lfc"]
    assert out["gene_id"].tolist() == table["gene_id"].tolist()
    assert out["abs_lfc"].tolist() == [1.5, 0.5, 0.0, 2.0, 1.0]
    assert "abs_lfc" not in table.columns


def test_derive_refuses_existing_column():
    with pytest.raises(ValueError):
        derive(_results(), "gene_id", lambda row: "x")


def test_derive_on_empty_table():
    out = derive(_results().iloc[0:0], "flag", lambda row: True)
    assert "flag" in out.columns
    assert out.empty


def test_classify_direction():
    assert classify_direction(1.5) == "up-regulated"
    assert classify_direction(-0.5) == "down-regulated"
    assert classify_direction(0.0) == "down-regulated"
    assert classify_direction(None) is None
    assert classify_direction(float("nan")) is None


def test_add_direction():
    out = add_direction(_results())
    assert out["direction"].tolist() == [
        "up-regulated",
        "down-regulated",
        "down-regulated",
        "up-regulated",
        "down-regulated",
    ]
