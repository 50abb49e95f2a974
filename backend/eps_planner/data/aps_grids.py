"""
Grilles d'évaluation par famille d'APS (Athlétisme, Sports collectifs, Gymnastique).

Chaque critère porte un barème en points par niveau ; pour un niveau donné,
la somme des points de la grille vaut 20. Un critère découpé en sous-critères
n'a pas de points propres : seuls ses sous-critères comptent.
"""

from typing import Dict, List

from eps_planner.schemas.school_class import Level

ATHLETICS = "Athlétisme"
TEAM_SPORTS = "Sports collectifs"
GYMNASTICS = "Gymnastique"

GRID_TOTAL = 20

# Mots-clés reconnus dans le nom d'une APS collective
_TEAM_KEYWORDS = ("foot", "collect", "basket", "hand", "volley")


def _points(tc: int, first: int, second: int) -> Dict[Level, int]:
    return {Level.TC: tc, Level.FIRST_YEAR: first, Level.SECOND_YEAR: second}


_COMMON = [
    {
        "id": "D",
        "title": "Connaissances conceptuelles / procédurales",
        "definition": (
            "Concepts et termes relatifs à l'APS support. Règlement de l'activité. "
            "Connaissances scientifiques et physiologiques spécifiques à l'échauffement "
            "et à l'entraînement."
        ),
        "tools": "Questions–réponses (oral & écrit)",
        "points": _points(3, 3, 3),
    },
    {
        "id": "E",
        "title": "Connaissances comportementales (attitudes)",
        "definition": (
            "Participation effective à l'APS. Comportement au sein du groupe, autonomie. "
            "Responsabilité (arbitrage, organisation, entraînement), respect d'autrui "
            "et des règles, assiduité/tenue."
        ),
        "tools": "Observation directe de l'élève sur l'ensemble du cycle d'apprentissage",
        "points": _points(5, 4, 3),
    },
]

GRIDS: Dict[str, List[dict]] = {
    ATHLETICS: [
        {
            "id": "A1",
            "title": "Habileté motrice",
            "definition": "produit",
            "tools": "Chronomètre, Décamètre (annexe N°3)",
            "points": _points(6, 7, 7),
        },
        {
            "id": "A2",
            "title": "Comportement moteur",
            "definition": "performance",
            "tools": "Chronomètre, Décamètre (annexe N°3)",
            "points": _points(6, 6, 7),
        },
        *_COMMON,
    ],
    TEAM_SPORTS: [
        {
            "id": "B1",
            "title": "Capacité sportive & habileté motrice",
            "definition": "produit du comportement physique",
            "tools": "Grille d'observation",
            "points": _points(0, 0, 0),
            "sub_criteria": [
                {"id": "B1a", "label": "individuelles", "points": _points(6, 6, 7)},
                {"id": "B1b", "label": "collectives", "points": _points(6, 7, 7)},
            ],
        },
        *_COMMON,
    ],
    GYMNASTICS: [
        {
            "id": "C1",
            "title": "Capacité sportive & habileté motrice",
            "definition": "produit du comportement physique",
            "tools": "Grille d'observation (annexe N°4)",
            "points": _points(12, 13, 14),
        },
        *_COMMON,
    ],
}


def resolve_aps(activity: str) -> str:
    """
    Famille de grille d'une APS à partir de son nom (insensible à la casse).
    Toute APS non reconnue relève de l'athlétisme.
    """
    name = activity.strip().lower()
    if "gym" in name:
        return GYMNASTICS
    if any(keyword in name for keyword in _TEAM_KEYWORDS):
        return TEAM_SPORTS
    return ATHLETICS


def criterion_points(criterion: dict, level: Level) -> int:
    sub_criteria = criterion.get("sub_criteria")
    if sub_criteria:
        return sum(sub["points"][level] for sub in sub_criteria)
    return criterion["points"][level]


def grid_total(aps: str, level: Level) -> int:
    return sum(criterion_points(c, Level(level)) for c in GRIDS[aps])


def aps_grid(activity: str, level: Level) -> dict:
    """Grille applicable à une APS pour un niveau, avec les points de chaque critère."""
    level = Level(level)
    aps = resolve_aps(activity)
    criteria = []
    for criterion in GRIDS[aps]:
        item = {
            "id": criterion["id"],
            "title": criterion["title"],
            "definition": criterion["definition"],
            "tools": criterion["tools"],
            "points": criterion_points(criterion, level),
        }
        if criterion.get("sub_criteria"):
            item["sub_criteria"] = [
                {"id": sub["id"], "label": sub["label"], "points": sub["points"][level]}
                for sub in criterion["sub_criteria"]
            ]
        criteria.append(item)
    return {"activity": activity, "aps": aps, "level": level, "criteria": criteria, "total": grid_total(aps, level)}
