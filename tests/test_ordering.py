import pandas as pd
import pytest

from expression_pipeline.ordering import apply_order, derive_order, gene_order, sample_order


def test_derive_order_example():
    assert derive_order(["a", "b", "a", "c"], [3, 1, 3, 2]) == ["b", "c", "a"]


def test_derive_order_is_stable():
    assert derive_order(["x", "y", "z"], [1, 1, 0]) == ["z", "x", "y"]


def test_derive_order_uses_smallest_key_of_duplicates():
    assert derive_order(["a", "b", "a"], [5, 2, 1]) == ["a", "b"]


def test_derive_order_length_mismatch():
    with pytest.raises(ValueError):
        derive_order(["a", "b"], [1])


def test_apply_order_keeps_rows():
    table = pd.DataFrame({"sample_id": ["s1", "s2", "s3", "s1"], "count": [1.0, 2.0, 3.0, 4.0]})
    ordered = apply_order(table, "sample_id", ["s2", "s3", "s1"])
    assert ordered["sample_id"].tolist() == ["s1", "s2", "s3", "s1"]
    assert ordered["count"].tolist() == [1.0, 2.0, 3.0, 4.0]
    assert list(ordered["sample_id"].cat.categories) == ["s2", "s3", "s1"]
    assert ordered["sample_id"].cat.ordered
    assert not isinstance(table["sample_id"].dtype, pd.CategoricalDtype)


def test_apply_order_rejects_unknown_values():
    table = pd.DataFrame({"sample_id": ["s1", "s9"]})
    with pytest.raises(ValueError):
        apply_order(table, "sample_id", ["s1"])


def test_sample_order_by_treatment():
    samples = pd.DataFrame({
        "sample_id": ["s1", "s2", "s3", "s4"],
        "treatment": ["untreated", "treated", "untreated", "treated"],
    })
    assert sample_order(samples) == ["s2", "s4", "s1", "s3"]


def test_gene_order_by_fold_change():
    results = pd.DataFrame({"gene_id": ["g1", "g2", "g3"], "log2_fold_change": [1.5, -2.0, 0.3]})
    assert gene_order(results) == ["g2", "g3", "g1"]
