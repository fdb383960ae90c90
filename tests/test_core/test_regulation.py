"""Tests for gene expression regulation."""

from __future__ import annotations

import pytest

from metabolab.core.regulation import Gene, RegulationType, RegulatoryElement


def _activator(**kwargs) -> RegulatoryElement:
    return RegulatoryElement(kind=RegulationType.ACTIVATOR, target="X", **kwargs)


def _repressor(**kwargs) -> RegulatoryElement:
    return RegulatoryElement(kind=RegulationType.REPRESSOR, target="X", **kwargs)


def test_basal_expression_without_regulators() -> None:
    gene = Gene(id="g1", enzyme_id="E1", basal_rate=0.2)
    assert gene.compute_expression({}) == pytest.approx(0.2)
    assert gene.synthesis_amount(0.5, {}) == pytest.approx(0.1)


def test_inactive_gene_is_silent() -> None:
    gene = Gene(id="g1", enzyme_id="E1", basal_rate=0.2, active=False)
    assert gene.compute_expression({}) == 0.0


def test_activator_saturates_at_max_fold() -> None:
    gene = Gene(
        id="g1", enzyme_id="E1", basal_rate=0.1,
        activators=[_activator(kd=1.0, max_fold=5.0, hill=1.0)],
    )
    rate = gene.compute_expression({"X": 1000.0})
    assert rate == pytest.approx(0.5, rel=1e-2)
    assert gene.activation_fold == pytest.approx(5.0, rel=1e-2)


def test_absent_repressor_has_no_effect() -> None:
    gene = Gene(id="g1", enzyme_id="E1", basal_rate=0.1, repressors=[_repressor(max_fold=10.0)])
    assert gene.compute_expression({"X": 0.0}) == 0.1
    assert gene.repression_fold == 1.0


def test_repressor_divides_expression() -> None:
    gene = Gene(
        id="g1", enzyme_id="E1", basal_rate=0.1,
        repressors=[_repressor(kd=1.0, max_fold=3.0, hill=1.0)],
    )
    assert gene.compute_expression({"X": 1.0}) == pytest.approx(0.05)


def test_expression_clamped_to_max_rate() -> None:
    gene = Gene(
        id="g1", enzyme_id="E1", basal_rate=0.5, max_rate=1.0,
        activators=[_activator(kd=0.1, max_fold=10.0)],
    )
    assert gene.compute_expression({"X": 100.0}) == 1.0


def test_missing_target_is_neutral() -> None:
    element = _activator(max_fold=10.0)
    assert element.effect({}) == 1.0
    assert element.occupancy({}) == 0.0


def test_hill_coefficient_clamped() -> None:
    assert _activator(hill=10.0).hill == 4.0
    assert _activator(hill=0.0).hill == 0.1


def test_reset_runtime() -> None:
    gene = Gene(id="g1", enzyme_id="E1", basal_rate=0.2)
    gene.compute_expression({})
    gene.reset_runtime()
    assert gene.expression_rate == 0.0
