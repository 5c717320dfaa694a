from __future__ import annotations


def resolve_dh_ds(*, dh: float | None, ds: float | None, dg: float | None, temp_k: float) -> tuple[float, float]:
    """
    Resolve (ΔH, ΔS) from any two of (ΔH, ΔS, ΔG(T)).

    Given two provided values among ``dh``, ``ds`` and ``dg``, the missing one
    is derived from ``ΔG(T) = ΔH − T * (ΔS / 1000)``. If all three are given,
    ``(dh, ds)`` is returned without checking ``dg`` for consistency.

    Parameters
    ----------
    dh : float or None
        Enthalpy change ΔH in kcal/mol.
    ds : float or None
        Entropy change ΔS in cal/(K·mol).
    dg : float or None
        Free energy change ΔG(T) in kcal/mol at ``temp_k``.
    temp_k : float
        Absolute temperature in Kelvin used for conversions.

    Returns
    -------
    tuple[float, float]
        ``(ΔH, ΔS)`` rounded to 4 decimal places.

    Raises
    ------
    ValueError
        If fewer than two of ``dh``, ``ds``, ``dg`` are provided.
    """
    present = sum(v is not None for v in (dh, ds, dg))
    if present < 2:
        raise ValueError("Insufficient thermo terms; need two of (dh, ds, dg).")

    if dh is not None and ds is not None:
        return round(float(dh), 4), round(float(ds), 4)

    if dh is not None and dg is not None:
        # ds = 1000 * (dh − dg) / T
        ds_calc = 1000.0 * (float(dh) - float(dg)) / float(temp_k)
        return round(float(dh), 4), round(ds_calc, 4)

    # dh = dg + T * (ds / 1000)
    dh_calc = float(dg) + float(temp_k) * (float(ds) / 1000.0)
    return round(dh_calc, 4), round(float(ds), 4)
