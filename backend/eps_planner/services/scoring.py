"""
Calcul de la note finale sur 20 à partir des dimensions d'évaluation.
Les pondérations sont fixées par niveau (somme = 100).
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Mapping, Tuple, Union

from eps_planner.schemas.evaluation import Dimension, Dims
from eps_planner.schemas.school_class import Level

MIN_GRADE = Decimal("0")
MAX_GRADE = Decimal("20")

COEFFICIENTS: Dict[Level, Dict[Dimension, int]] = {
    Level.TC: {
        Dimension.MOTOR: 60,
        Dimension.BEHAVIOUR: 20,
        Dimension.KNOWLEDGE: 20,
    },
    Level.FIRST_YEAR: {
        Dimension.MOTOR: 50,
        Dimension.TACTICAL: 30,
        Dimension.BEHAVIOUR: 10,
        Dimension.KNOWLEDGE: 10,
    },
    Level.SECOND_YEAR: {
        Dimension.PROJECT: 40,
        Dimension.TACTICAL: 30,
        Dimension.BEHAVIOUR: 20,
        Dimension.KNOWLEDGE: 10,
    },
}


def applicable_dimensions(level: Level) -> Tuple[Dimension, ...]:
    """Dimensions évaluées pour un niveau, dans l'ordre du barème."""
    return tuple(COEFFICIENTS[Level(level)])


def _to_decimal(note: Union[float, int, Decimal]) -> Decimal:
    # str() évite de transporter l'erreur binaire du float (16.9 → 16.899999…)
    return note if isinstance(note, Decimal) else Decimal(str(note))


def clamp(note: Union[float, Decimal]) -> Decimal:
    return max(MIN_GRADE, min(MAX_GRADE, _to_decimal(note)))


def round_half(note: Union[float, Decimal]) -> float:
    """
    Arrondit une note au demi-point le plus proche (demi supérieur) dans [0, 20].
    Exemple : 10,25 → 10,5 ; 10,2 → 10,0 ; 14,9 → 15,0 ; 16,75 → 17,0.
    """
    doubled = (clamp(note) * 2).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return float(doubled / 2)


def compute_final_grade(level: Level, dims: Union[Dims, Mapping[str, float]]) -> float:
    """
    Calcule la note finale : somme pondérée des dimensions / 100, arrondie à 0,5.
    Le calcul est fait en décimal exact pour que les demi-points tombent juste.
    Les dimensions manquantes valent 0 ; celles hors barème du niveau sont ignorées.
    Une dimension inconnue lève une ValueError.
    """
    if isinstance(dims, Dims):
        values = dims.as_mapping()
    else:
        values = {Dimension(k): v for k, v in dims.items()}

    weights = COEFFICIENTS[Level(level)]
    total = sum(clamp(values.get(dim) or 0) * weight for dim, weight in weights.items())
    return round_half(total / 100)
