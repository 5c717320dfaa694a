from __future__ import annotations
from typing import Any, Iterable, Mapping, Tuple

from primer_thermo.energies.data.thermo_math import resolve_dh_ds
from primer_thermo.energies.energy_types import (
    BasePairMap,
    DangleEnergies,
    DhDs,
    LoopEnergies,
    MultiLoopCoeffs,
    PairEnergies,
    SaltParameters,
)
from primer_thermo.utils.nucleotide_utils import flip_key

_OWCZARZY_KEYS = ("a", "b", "c", "d", "e", "f", "g")
_SALT_MODELS = frozenset({"owczarzy2008", "santalucia1998"})


# ---------- Top-level config helpers ----------

def get_temperature_kelvin(data: Mapping[str, Any]) -> float:
    """
    Return the reference temperature (Kelvin) used for ΔG → ΔS conversions.

    Prefers ``metadata.temperature_kelvin``, then top-level
    ``temperature_kelvin``, else 310.15 K.
    """
    metadata = data.get("metadata") or {}
    temp_k = metadata.get("temperature_kelvin") or data.get("temperature_kelvin") or 310.15

    return float(temp_k)


def get_metadata(data: Mapping[str, Any]) -> Tuple[str, str, str]:
    """
    Return ``(name, version, description)`` from the ``metadata`` block.

    Raises
    ------
    ValueError
        If the set carries no name.
    """
    metadata = data.get("metadata") or {}
    name = metadata.get("name")
    if not name:
        raise ValueError("Parameter set must declare 'metadata.name'.")

    return str(name), str(metadata.get("version", "0")), str(metadata.get("description", ""))


def parse_complements(data: Mapping[str, Any]) -> BasePairMap:
    """
    Parse and normalize the base complement map.

    Raises
    ------
    ValueError
        If the complements mapping is missing or empty.
    """
    complements_data = data.get("complements")
    if not isinstance(complements_data, dict) or not complements_data:
        raise ValueError("YAML must contain a non-empty 'complements' mapping.")

    return {str(k).upper(): str(v).upper() for k, v in complements_data.items()}


def validate_dna_complements(complements: BasePairMap) -> None:
    """
    Validate that a DNA complement map contains T and does not contain U.

    Raises
    ------
    ValueError
        If 'T' is missing or 'U' is present.
    """
    if "T" not in complements.keys() and "T" not in complements.values():
        raise ValueError("DNA complements must include thymine ('T').")
    if "U" in complements.keys() or "U" in complements.values():
        raise ValueError("DNA complements must not contain uracil ('U') (RNA-specific).")


# ---------- Single terms ----------

def parse_term(node: Any, temp_k: float, *, where: str) -> DhDs:
    """
    Resolve a single ``{dh, ds}`` / ``{dh, dg_37}`` / ``{ds, dg_37}`` node to ``(ΔH, ΔS)``.

    Raises
    ------
    ValueError
        If the node is not a mapping or carries fewer than two terms.
    """
    if not isinstance(node, Mapping):
        raise ValueError(f"Expected a mapping of thermodynamic terms at '{where}'.")
    dg = node.get("dg") if "dg" in node else node.get("dg_37")
    try:
        return resolve_dh_ds(dh=node.get("dh"), ds=node.get("ds"), dg=dg, temp_k=temp_k)
    except ValueError as exc:
        raise ValueError(f"{exc} (at '{where}')") from exc


def parse_initiation(data: Mapping[str, Any], temp_k: float) -> Tuple[DhDs, DhDs, DhDs, DhDs]:
    """
    Parse the ``initiation`` block into ``(base, terminal_at, terminal_gc, symmetry)``.

    Missing entries default to ``(0.0, 0.0)``.

    Raises
    ------
    ValueError
        If the block is missing.
    """
    node = data.get("initiation")
    if not isinstance(node, dict):
        raise ValueError("Missing 'initiation' section.")

    def _get(key: str) -> DhDs:
        if key not in node:
            return 0.0, 0.0
        return parse_term(node[key], temp_k, where=f"initiation.{key}")

    return _get("base"), _get("terminal_at"), _get("terminal_gc"), _get("symmetry")


# ---------- Nearest-neighbor tables ----------

def parse_pair_table(data: Mapping[str, Any], section: str, temp_k: float, *, required: bool = False) -> PairEnergies:
    """
    Parse a flat ``"XY/ZW" → {dh, ds}`` table and add the opposite-strand keys.

    Each physical stack can be read from either strand; ``"CA/GT"`` and
    ``"TG/AC"`` are the same stack. The flipped key is only added when the file
    does not list it explicitly.

    Parameters
    ----------
    data : Mapping[str, Any]
        Parsed YAML tree.
    section : str
        Section name (``"stacks"`` or ``"mismatches"``).
    temp_k : float
        Temperature in Kelvin for conversions.
    required : bool
        Raise when the section is absent or empty.

    Returns
    -------
    PairEnergies
        Mapping ``"XY/ZW" → (ΔH, ΔS)`` in both orientations.

    Raises
    ------
    ValueError
        If a key is malformed, an entry is unresolvable, or a required section
        is missing.
    """
    table_data = data.get(section)
    if not isinstance(table_data, dict) or not table_data:
        if required:
            raise ValueError(f"YAML must contain a non-empty '{section}' mapping.")
        return {}

    explicit: PairEnergies = {}
    for raw_key, entry in table_data.items():
        key = str(raw_key).upper()
        top, _, bottom = key.partition("/")
        if len(top) != 2 or len(bottom) != 2:
            raise ValueError(f"Malformed nearest-neighbor key '{raw_key}' in '{section}'.")
        explicit[key] = parse_term(entry, temp_k, where=f"{section}.{raw_key}")

    pair_energies: PairEnergies = dict(explicit)
    for key, value in explicit.items():
        pair_energies.setdefault(flip_key(key), value)

    return pair_energies


# ---------- Loop length tables ----------

def parse_loop_table(data: Mapping[str, Any], keys: Iterable[str], temp_k: float) -> LoopEnergies:
    """
    Parse baseline loop energies indexed by loop length (nt).

    The first present key among ``keys`` is used. Entries give any two of
    ``dh``, ``ds``, ``dg`` (or ``dg_37``); entries with none are skipped.

    Returns
    -------
    LoopEnergies
        Mapping ``length → (ΔH, ΔS)``. Empty if no table is present.
    """
    loop = None
    for loop_type in keys:
        if loop_type in data:
            loop = data[loop_type]
            break

    if not isinstance(loop, dict):
        return {}

    loop_energies: LoopEnergies = {}
    for length_str, entry in loop.items():
        loop_len = int(length_str)
        dh = entry.get("dh")
        ds = entry.get("ds")
        dg = entry.get("dg") if "dg" in entry else entry.get("dg_37")
        if dh is None and ds is None and dg is None:
            continue

        loop_energies[loop_len] = resolve_dh_ds(dh=dh, ds=ds, dg=dg, temp_k=temp_k)

    return loop_energies


def parse_multiloop(data: Mapping[str, Any]) -> MultiLoopCoeffs:
    """
    Parse multiloop coefficients ``(a, b, c, d)``.

    Raises
    ------
    ValueError
        If the ``multiloop`` section is missing or not a mapping.
    """
    multiloop_data = data.get("multiloop")
    if not isinstance(multiloop_data, dict):
        raise ValueError("Missing 'multiloop' section.")

    return (
        float(multiloop_data.get("a", 0.0)),
        float(multiloop_data.get("b", 0.0)),
        float(multiloop_data.get("c", 0.0)),
        float(multiloop_data.get("d", 0.0)),
    )


# ---------- Terminal / dangling / consecutive corrections ----------

def parse_terminal_mismatch(data: Mapping[str, Any], temp_k: float) -> Tuple[DhDs, DhDs]:
    """Parse ``terminal_mismatch_corrections`` into ``(five_prime, three_prime)``."""
    node = data.get("terminal_mismatch_corrections") or {}
    five = parse_term(node["five_prime"], temp_k, where="terminal_mismatch_corrections.five_prime") \
        if "five_prime" in node else (0.0, 0.0)
    three = parse_term(node["three_prime"], temp_k, where="terminal_mismatch_corrections.three_prime") \
        if "three_prime" in node else (0.0, 0.0)

    return five, three


def parse_dangles(data: Mapping[str, Any], temp_k: float) -> Tuple[DangleEnergies, DangleEnergies]:
    """Parse the 5' and 3' dangling-end tables keyed by the dangling base."""
    node = data.get("dangling_ends") or {}

    def _side(side: str) -> DangleEnergies:
        side_data = node.get(side) or {}
        return {
            str(base).upper(): parse_term(entry, temp_k, where=f"dangling_ends.{side}.{base}")
            for base, entry in side_data.items()
        }

    return _side("five_prime"), _side("three_prime")


def parse_consecutive_mismatch(data: Mapping[str, Any], temp_k: float) -> Tuple[DhDs, DhDs]:
    """Parse ``consecutive_mismatch`` into ``(per_mismatch, maximum)``."""
    node = data.get("consecutive_mismatch") or {}
    per = parse_term(node["per_mismatch"], temp_k, where="consecutive_mismatch.per_mismatch") \
        if "per_mismatch" in node else (0.0, 0.0)
    maximum = parse_term(node["maximum"], temp_k, where="consecutive_mismatch.maximum") \
        if "maximum" in node else (0.0, 0.0)

    return per, maximum


# ---------- Salt ----------

def parse_salt(data: Mapping[str, Any]) -> SaltParameters:
    """
    Parse the ``salt`` block.

    Raises
    ------
    ValueError
        If the block is missing, names an unknown model, or the Owczarzy model
        lacks any of its seven coefficients.
    """
    node = data.get("salt")
    if not isinstance(node, dict):
        raise ValueError("Missing 'salt' section.")

    model = str(node.get("model", "")).lower()
    if model not in _SALT_MODELS:
        raise ValueError(f"Unknown salt model '{model}'. Expected one of {sorted(_SALT_MODELS)}.")

    owczarzy = None
    if model == "owczarzy2008":
        coeffs = node.get("owczarzy") or {}
        missing = [k for k in _OWCZARZY_KEYS if k not in coeffs]
        if missing:
            raise ValueError(f"Owczarzy salt model is missing coefficients: {missing}")
        owczarzy = tuple(float(coeffs[k]) for k in _OWCZARZY_KEYS)

    return SaltParameters(
        MODEL=model,
        MG_DNTP_KA=float(node.get("mg_dntp_ka", 3.0e4)),
        TRIS_MONOVALENT_FRACTION=float(node.get("tris_monovalent_fraction", 0.5)),
        OWCZARZY=owczarzy,
        NA_EQUIVALENT_MG_FACTOR=float(node.get("na_equivalent_mg_factor", 120.0)),
    )
