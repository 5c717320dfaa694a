"""
Unit tests for the YAML reader and the (ΔH, ΔS, ΔG) resolution helper.
"""
import pytest

from primer_thermo.energies.data.thermo_math import resolve_dh_ds
from primer_thermo.energies.data.yaml_io import read_yaml


def test_read_yaml_returns_mapping(tmp_path):
    """
    A YAML mapping is returned as a dict; an empty file gives an empty dict.
    """
    path = tmp_path / "params.yaml"
    path.write_text("a: 1\nb: [1, 2]\n", encoding="utf-8")
    assert read_yaml(path) == {"a": 1, "b": [1, 2]}

    empty = tmp_path / "empty.yml"
    empty.write_text("", encoding="utf-8")
    assert read_yaml(empty) == {}


def test_read_yaml_rejects_bad_input(tmp_path):
    """
    Wrong suffixes, missing files and non-mapping documents raise.
    """
    json_file = tmp_path / "params.json"
    json_file.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError, match="Only YAML"):
        read_yaml(json_file)

    with pytest.raises(ValueError, match="not found"):
        read_yaml(tmp_path / "missing.yaml")

    listing = tmp_path / "list.yaml"
    listing.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        read_yaml(listing)


def test_resolve_dh_ds_passthrough():
    """
    ΔH and ΔS are returned as given when both are present.
    """
    assert resolve_dh_ds(dh=-7.6, ds=-21.3, dg=None, temp_k=310.15) == (-7.6, -21.3)


def test_resolve_dh_ds_derives_entropy():
    """
    ΔS follows from ΔH and ΔG(T).
    """
    delta_h, delta_s = resolve_dh_ds(dh=0.0, ds=None, dg=3.5, temp_k=310.15)
    assert delta_h == 0.0
    assert delta_s == pytest.approx(-1000.0 * 3.5 / 310.15, abs=1e-4)


def test_resolve_dh_ds_derives_enthalpy():
    """
    ΔH follows from ΔS and ΔG(T).
    """
    delta_h, delta_s = resolve_dh_ds(dh=None, ds=-10.0, dg=1.0, temp_k=300.0)
    assert delta_h == pytest.approx(-2.0)
    assert delta_s == -10.0


def test_resolve_dh_ds_needs_two_terms():
    """
    A single term cannot be resolved.
    """
    with pytest.raises(ValueError, match="Insufficient"):
        resolve_dh_ds(dh=-1.0, ds=None, dg=None, temp_k=310.15)
