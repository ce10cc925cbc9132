import pytest

from expression_pipeline.data_models import (
    SampleRecord,
    TestResultRecord,
    results_to_dataframe,
    samples_to_dataframe,
)


def test_samples_to_dataframe():
    df = samples_to_dataframe([
        SampleRecord("SRR1039508", "untreated", {"cell": "N61311"}),
        SampleRecord("SRR1039509", "treated", {"cell": "N61311"}),
    ])
    assert list(df.columns) == ["sample_id", "treatment", "cell"]
    assert df["treatment"].tolist() == ["untreated", "treated"]


def test_empty_samples_keep_schema():
    df = samples_to_dataframe([], key="sample")
    assert list(df.columns) == ["sample", "treatment"]


def test_results_to_dataframe_marks_missing_p_values():
    df = results_to_dataframe([
        TestResultRecord("ENSG00000152583", 4.57, 1e-20),
        TestResultRecord("ENSG00000000003", -0.38, None),
    ])
    assert df["adjusted_p_value"].isna().tolist() == [False, True]


def test_results_to_dataframe_rejects_duplicate_genes():
    with pytest.raises(ValueError):
        results_to_dataframe([TestResultRecord("g1", 1.0, 0.01), TestResultRecord("g1", 2.0, 0.02)])
