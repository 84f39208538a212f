# tests/test_impact.py
"""
Tests for single-factor parameter impact analysis.
"""

import logging

import pytest

from rag_optimizer.packages.run_analysis import (
    DEFAULT_PARAMETER_VALUES,
    ImpactRow,
    InvalidParameterError,
    RunAnalysis,
    RunParameter,
    impact_extremes,
    impact_of,
    parameter_name,
    resolve_parameter,
)

from .conftest import LARGE_MODEL, SMALL_MODEL


@pytest.fixture
def make_analysis(make_run):
    def _make_analysis(index: int, found: int, total: int = 10, **run_fields) -> RunAnalysis:
        return RunAnalysis(run=make_run(index, **run_fields), found=found, total=total, avg_rank=1.0)
    return _make_analysis


class TestImpactOf:
    """Tests for impact_of."""

    def test_chunk_size_scenario(self, make_analysis):
        """Two baseline runs, 200 -> 6 found and 500 -> 8 found."""
        analyses = [
            make_analysis(1, 6, total=9, chunk_size_words=200),
            make_analysis(2, 8, total=9, chunk_size_words=500),
        ]

        rows = impact_of(analyses, "chunk_size_words", [200, 500], SMALL_MODEL)

        assert [(r.value, r.mean_found, r.sample_total) for r in rows] == [(200, 6.0, 9), (500, 8.0, 9)]

    def test_caller_order_preserved(self, make_analysis):
        analyses = [
            make_analysis(1, 6, chunk_size_words=200),
            make_analysis(2, 8, chunk_size_words=500),
        ]

        rows = impact_of(analyses, "chunk_size_words", [500, 200], SMALL_MODEL)

        assert [r.value for r in rows] == [500, 200]

    def test_mean_over_group(self, make_analysis):
        analyses = [
            make_analysis(1, 4, chip_count=2),
            make_analysis(2, 7, chip_count=2),
            make_analysis(3, 9, chip_count=5),
        ]

        rows = impact_of(analyses, RunParameter.CHIP_COUNT, [2, 5], SMALL_MODEL)

        assert rows[0].mean_found == pytest.approx(5.5)
        assert rows[0].sample_size == 2
        assert rows[1].mean_found == pytest.approx(9.0)

    def test_sample_total_from_first_match(self, make_analysis):
        analyses = [
            make_analysis(1, 4, total=9, chip_position="prepend"),
            make_analysis(2, 6, total=12, chip_position="prepend"),
        ]

        rows = impact_of(analyses, "chip_position", ["prepend"], SMALL_MODEL)

        assert rows[0].sample_total == 9

    def test_excludes_non_baseline_model(self, make_analysis):
        analyses = [
            make_analysis(1, 4, chunk_size_words=500),
            make_analysis(2, 10, chunk_size_words=500, embedding_model=LARGE_MODEL),
            make_analysis(3, 10, chunk_size_words=500, embedding_model=LARGE_MODEL),
        ]

        rows = impact_of(analyses, "chunk_size_words", [500], SMALL_MODEL)

        assert rows[0].sample_size == 1
        assert rows[0].mean_found == pytest.approx(4.0)

    def test_no_matches_reports_zero(self, make_analysis):
        analyses = [make_analysis(1, 4, chunk_overlap_words=0)]

        rows = impact_of(analyses, "chunk_overlap_words", [0, 50], SMALL_MODEL)

        assert rows[1] == ImpactRow(value=50, mean_found=0.0, sample_total=0, sample_size=0)

    def test_unknown_parameter_raises(self, make_analysis):
        with pytest.raises(InvalidParameterError) as exc_info:
            impact_of([make_analysis(1, 4)], "temperature", [0.1], SMALL_MODEL)

        assert exc_info.value.parameter == "temperature"
        assert "chunk_size_words" in exc_info.value.known

    def test_unknown_parameter_raises_on_empty_input(self):
        with pytest.raises(InvalidParameterError):
            impact_of([], "name", ["x"], SMALL_MODEL)

    def test_input_not_mutated(self, make_analysis):
        analyses = [make_analysis(1, 4), make_analysis(2, 4, embedding_model=LARGE_MODEL)]
        snapshot = list(analyses)

        impact_of(analyses, "chunk_size_words", [200], SMALL_MODEL)

        assert analyses == snapshot


class TestResolveParameter:
    """Tests for parameter accessors."""

    def test_every_enum_member_resolves(self, make_run):
        run = make_run(chunk_size_words=500, chip_position="prepend_append")
        for parameter in RunParameter:
            assert resolve_parameter(parameter)(run) == getattr(run, parameter.value)

    def test_defaults_only_use_known_parameters(self):
        for parameter in DEFAULT_PARAMETER_VALUES:
            resolve_parameter(parameter)


class TestImpactExtremes:
    """Tests for impact_extremes."""

    def test_ignores_empty_groups(self):
        rows = [
            ImpactRow(value=0, mean_found=3.0, sample_total=9, sample_size=2),
            ImpactRow(value=50, mean_found=0.0, sample_total=0, sample_size=0),
            ImpactRow(value=100, mean_found=5.5, sample_total=9, sample_size=2),
        ]

        assert impact_extremes(rows) == (5.5, 3.0)

    def test_no_samples(self):
        assert impact_extremes([ImpactRow(value=1, mean_found=0.0, sample_total=0)]) == (None, None)


class TestParameterName:
    """Tests for parameter_name."""

    def test_enum_and_string_give_same_name(self):
        assert parameter_name(RunParameter.CHIP_COUNT) == "chip_count"
        assert parameter_name("chip_count") == "chip_count"

    def test_impact_logs_plain_parameter_name(self, make_analysis, caplog):
        with caplog.at_level(logging.INFO):
            impact_of([make_analysis(1, 4)], RunParameter.CHIP_COUNT, [2, 9], SMALL_MODEL)

        messages = [r.getMessage() for r in caplog.records]
        assert any("impact of 'chip_count'" in message for message in messages)
        assert any("No baseline runs with chip_count = 9" in message for message in messages)
        assert not any("RunParameter" in message for message in messages)
