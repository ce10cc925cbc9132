import numpy as np
import pandas as pd
import pytest

from expression_pipeline.aggregate import aggregate, group_by, summarize_mean


def _annotated():
    return pd.DataFrame({
        "gene_id": ["g1", "g1", "g1", "g2", "g2", "g2"],
        "treatment": ["untreated", "treated", "treated", "untreated", "treated", np.nan],
        "direction": ["up-regulated"] * 3 + ["down-regulated"] * 3,
        "count": [10.0, 20.0, 10.0, 5.0, 7.0, 9.0],
    })


def test_constant_group_mean():
    table = pd.DataFrame({"gene_id": ["g1"] * 4, "count": [3.5] * 4})
    summary = summarize_mean(table, ["gene_id"])
    assert summary["mean_count"].tolist() == [3.5]


def test_summarize_mean_per_treatment():
    summary = summarize_mean(_annotated(), ["gene_id", "treatment", "direction"])
    assert list(summary.columns) == ["gene_id", "treatment", "direction", "mean_count"]
    g1 = summary[summary["gene_id"] == "g1"].set_index("treatment")["mean_count"]
    assert g1["untreated"] == 10.0
    assert g1["treated"] == 15.0


def test_missing_keys_form_their_own_group():
    summary = summarize_mean(_annotated(), ["gene_id", "treatment"])
    assert len(summary) == 5
    missing = summary[summary["treatment"].isna()]
    assert missing["mean_count"].tolist() == [9.0]


def test_every_row_lands_in_one_group():
    groups = group_by(_annotated(), ["gene_id", "direction"])
    assert sum(len(g) for _, g in groups) == len(_annotated())


def test_aggregate_with_callable():
    def spread(values):
        return values.max() - values.min()

    out = aggregate(group_by(_annotated(), ["gene_id"]), "count", spread)
    assert list(out.columns) == ["gene_id", "spread_count"]
    assert out["spread_count"].tolist() == [10.0, 4.0]


def test_group_by_requires_keys():
    with pytest.raises(ValueError):
        group_by(_annotated(), [])
    with pytest.raises(ValueError):
        group_by(_annotated(), ["sample_id"])
