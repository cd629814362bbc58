"""Tests for mass-difference binning."""

import copy

import pytest

from pxevidence.core.context import EvidenceContext
from pxevidence.core.models import PSMEvidence
from pxevidence.core.modification.binning import (
    assemble_mass_bins,
    correct_mass_bins,
    create_mass_bins,
    find_bin_index,
)


def _psm(spectrum, massdiff, assigned=()):
    return PSMEvidence(
        spectrum=spectrum,
        peptide="PEPTIDE",
        protein="P1",
        assumed_charge=2,
        calc_neutral_pep_mass=799.36,
        ion_form="PEPTIDE#2#799.3600",
        massdiff=massdiff,
        assigned_mass_diffs=list(assigned),
    )


@pytest.fixture
def modifications():
    psms = [
        _psm("s1", 0.02),
        _psm("s2", 0.04),
        _psm("s3", 15.98, assigned=[15.9949, 15.9949, 0.0]),
        _psm("s4", 16.02),
        _psm("s5", -17.03),
    ]
    return assemble_mass_bins(psms, EvidenceContext())


def _bin_at(modifications, center):
    for mass_bin in modifications.mass_bins:
        if mass_bin.mass_center == center:
            return mass_bin
    raise AssertionError(f"no bin centred at {center}")


def test_bin_layout():
    bins = create_mass_bins(0.1, 0.05, 500.0)
    assert len(bins) == 10001
    assert bins[0].mass_center == -500.0
    assert bins[-1].mass_center == 500.0
    assert bins[5000].mass_center == 0.0
    assert bins[5000].lower_mass == -0.05
    assert bins[5000].higher_mass == 0.05


def test_half_open_membership():
    bins = create_mass_bins(0.1, 0.05, 1.0)
    upper = [b.higher_mass for b in bins]
    assert bins[find_bin_index(upper, bins, 0.05)].mass_center == 0.0
    assert bins[find_bin_index(upper, bins, 0.0501)].mass_center == 0.1
    assert find_bin_index(upper, bins, 5.0) is None
    assert find_bin_index(upper, bins, -1.05) is None


def test_observed_and_assigned_membership(modifications):
    zero = _bin_at(modifications, 0.0)
    assert [p.spectrum for p in zero.observed_mods] == ["s1", "s2"]
    assert zero.assigned_mods == []

    oxidation = _bin_at(modifications, 16.0)
    assert [p.spectrum for p in oxidation.observed_mods] == ["s3", "s4"]
    # identical assigned masses of one PSM count once, zeros never
    assert [p.spectrum for p in oxidation.assigned_mods] == ["s3"]


def test_zero_bin_correction(modifications):
    assert modifications.zero_bin_deviation == pytest.approx(0.03)

    zero = _bin_at(modifications, 0.0)
    assert zero.average_mass == 0.03
    assert zero.corrected_mass == 0.0

    oxidation = _bin_at(modifications, 16.0)
    assert oxidation.average_mass == 16.0
    assert oxidation.corrected_mass == 15.97

    ammonia = _bin_at(modifications, -17.0)
    assert ammonia.average_mass == -17.03
    assert ammonia.corrected_mass == -17.0

    empty = _bin_at(modifications, 42.0)
    assert empty.corrected_mass == 42.0


def test_correction_is_idempotent(modifications):
    before = [(b.average_mass, b.corrected_mass) for b in modifications.mass_bins]
    bins = copy.deepcopy(modifications.mass_bins)
    correct_mass_bins(bins, modifications.zero_bin_deviation)
    correct_mass_bins(bins, modifications.zero_bin_deviation)
    assert [(b.average_mass, b.corrected_mass) for b in bins] == before


def test_no_psms_gives_centred_bins():
    modifications = assemble_mass_bins([], EvidenceContext(mass_bin_amplitude=1.0))
    assert modifications.zero_bin_deviation == 0.0
    assert [b.corrected_mass for b in modifications.mass_bins] == [
        b.mass_center for b in modifications.mass_bins
    ]
