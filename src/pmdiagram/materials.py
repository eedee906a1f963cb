"""Material model for the P-M interaction engine.

Concrete is represented by an equivalent rectangular stress block of
intensity ``0.85 fc`` over a depth ``a = beta1 * c``; reinforcing steel is
elastic-perfectly-plastic with modulus ``Es`` and yield strength ``fy``.

Key values (read from ``data/material_tables.yaml``)
----------------------------------------------------
* ``Es = 2.04e6 kgf/cm2``
* ``epsilon_cu = 0.003``
* ``beta1 = 0.85`` for ``fc <= 280 kgf/cm2``, reduced by 0.05 for every
  70 kgf/cm2 above that, but not below 0.65.
"""

from __future__ import annotations

from dataclasses import dataclass

from .utils import load_material_tables


@dataclass(frozen=True)
class MaterialModel:
    """Fixed material constants used by the sweep.

    Attributes
    ----------
    Es : float
        Steel elastic modulus, kgf/cm^2.
    epsilon_cu : float
        Concrete ultimate compressive strain.
    stress_block_factor : float
        Intensity of the rectangular stress block as a fraction of ``fc``.
    """

    Es: float
    epsilon_cu: float
    stress_block_factor: float = 0.85

    def yield_strain(self, fy: float) -> float:
        """Steel yield strain ``fy / Es``."""
        return fy / self.Es


def get_material_model() -> MaterialModel:
    """Build the default :class:`MaterialModel` from the material tables."""
    tables = load_material_tables()
    return MaterialModel(
        Es=float(tables["steel"]["Es"]),
        epsilon_cu=float(tables["concrete"]["epsilon_cu"]),
        stress_block_factor=float(tables["concrete"]["stress_block_factor"]),
    )


def compute_beta1(fc: float) -> float:
    """Stress-block depth factor for a concrete strength ``fc`` (kgf/cm^2).

    Parameters
    ----------
    fc : float
        Specified compressive strength of concrete, kgf/cm^2.

    Returns
    -------
    float
        ``beta1`` in the range ``[minimum, base]``.
    """
    law = load_material_tables()["beta1"]
    base = float(law["base"])
    fc_limit = float(law["fc_limit"])
    if fc <= fc_limit:
        return base
    beta1 = base - float(law["step"]) * (fc - fc_limit) / float(law["per"])
    return max(beta1, float(law["minimum"]))
