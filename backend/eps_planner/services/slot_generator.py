"""
Générateur de créneaux hebdomadaires.

À partir d'une date de départ et des horaires d'une classe, produit la suite
ordonnée des créneaux (date, heure). La suite est paresseuse et redémarrable
(fonction pure de ses entrées) ; chaque horaire est borné à `MAX_WEEKS`
semaines (~10 ans) pour garantir la terminaison.
"""

import datetime as dt
import heapq
from itertools import islice
from typing import Iterable, Iterator, NamedTuple, Optional

from eps_planner.schemas.school_class import TimeSlot

# Heure utilisée quand une séance n'a pas d'heure explicite
DEFAULT_SLOT_TIME = "09:30"

MAX_WEEKS = 520


class Slot(NamedTuple):
    """Créneau (date, heure) qu'une séance peut occuper."""
    date: dt.date
    time: str


def slot_key(day: dt.date, time: Optional[str]) -> Slot:
    """Clé d'occupation d'une séance, avec l'heure par défaut si absente."""
    return Slot(day, time or DEFAULT_SLOT_TIME)


def weekday_index(day: dt.date) -> int:
    """Jour de la semaine au format des horaires : 0 = dimanche … 6 = samedi."""
    return day.isoweekday() % 7


def first_occurrence(start_date: dt.date, weekday: int) -> dt.date:
    """Premier jour `weekday` tombant à partir de `start_date` (inclus)."""
    return start_date + dt.timedelta(days=(weekday - weekday_index(start_date)) % 7)


def _weekly_slots(start_date: dt.date, pattern: TimeSlot, max_weeks: int) -> Iterator[Slot]:
    first = first_occurrence(start_date, pattern.weekday)
    for week in range(max_weeks):
        yield Slot(first + dt.timedelta(weeks=week), pattern.start)


def generate_slots(
    start_date: dt.date,
    patterns: Iterable[TimeSlot],
    count: Optional[int] = None,
    max_weeks: int = MAX_WEEKS,
) -> Iterator[Slot]:
    """
    Fusionne les occurrences de tous les horaires par ordre chronologique
    (à date égale, par heure de début croissante).
    Tronqué à `count` créneaux si fourni, sinon consommé à la demande.
    """
    merged = heapq.merge(*(_weekly_slots(start_date, p, max_weeks) for p in patterns))
    if count is not None:
        return islice(merged, count)
    return merged
