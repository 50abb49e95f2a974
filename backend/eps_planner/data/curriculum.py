"""
Référentiel des modules EPS et des objectifs de séance par APS.

Chaque niveau couvre deux modules ; chaque APS d'un module liste un objectif
par séance (12 séances). Sert à nommer les séances à la création d'un cycle.
"""

from typing import Dict, List

from eps_planner.schemas.school_class import Level

MODULE_NAMES: Dict[int, str] = {
    1: "Équilibre moteur et intégration par le sport",
    2: "Gestion de l'effort physique",
    3: "Effort physique et performance sportive",
    4: "Engagement moteur et efficience sportive",
    5: "Prise d'initiative et pratique physique responsable",
    6: "Efficacité et créativité motrice sportive",
}

LEVEL_MODULES: Dict[Level, List[int]] = {
    Level.TC: [1, 2],
    Level.FIRST_YEAR: [3, 4],
    Level.SECOND_YEAR: [5, 6],
}

_SPRINT = [
    "Test d'observation.",
    "Position correcte des appuis au départ.",
    "Réaction rapide au signal.",
    "Réagir aux signaux visuels/auditifs.",
    "Placement par rapport au starting-block.",
    "Identifier le pied de poussée.",
    "Redressement progressif + synchronisation.",
    "Course rectiligne (appui du pied).",
    "Course à rythme variable.",
    "Bon départ + redressement + course rythmique.",
    "Bon départ + redressement + course axée.",
    "Évaluation (80m G / 60m F).",
]

THEMES: Dict[int, Dict[str, List[str]]] = {
    1: {
        "Basket-ball": [
            "Détecter les niveaux pratiques individuels et collectifs en basketball.",
            "Connaître l'APS (définition, règles, technique, tactique).",
            "Garder la balle par des passes face à une défense et tenter un tir.",
            "Dribbler et conclure par un tir.",
            "Échanges en supériorité offensive et tir réussi.",
            "Échanges en supériorité offensive et tir réussi (suite).",
            "Montée rapide face à une défense non organisée pour marquer.",
            "Contre-attaque face à une défense non organisée pour marquer.",
            "Utiliser les couloirs latéraux pour marquer.",
            "Fixer la défense dans une zone et jouer dans l'autre (supériorité).",
            "Match dirigé (préparation au test).",
            "Évaluation des niveaux pratiques (individuel/collectif).",
        ],
        "Gymnastique au sol": [
            "Évaluation diagnostique (niveau gymnique).",
            "Éléments de liaison — difficulté A.",
            "Éléments de liaison — difficulté A (suite).",
            "Éléments — difficulté B.",
            "Éléments — difficulté B (suite).",
            "Éléments — difficulté C avec parade.",
            "Éléments — difficulté C avec parade (suite).",
            "Mini-enchaînement (2A + 2B).",
            "Mini-enchaînement (2A + 1B + 1C).",
            "Enchaînement (2A + 2B + 1C).",
            "Pré-évaluation : (2A + 3B + 2C).",
            "Évaluation sommative (enchaînement complet).",
        ],
        "Athlétisme — Course de vitesse": _SPRINT,
    },
    2: {
        "Basket-ball": [
            "Déterminer le niveau initial (basketball).",
            "Rappels règles/techniques/tactique de base.",
            "Passes pour conserver la balle face à la défense.",
            "Dribble efficace + tir.",
            "Supériorité numérique : échanges + tir réussi.",
            "Supériorité numérique : échanges + tir (suite).",
            "Montée rapide en égalité pour marquer.",
            "Contre-attaque face à défense non organisée.",
            "Utiliser les couloirs latéraux pour progresser.",
            "Fixer la défense et jouer ailleurs.",
            "Match dirigé d'intégration.",
            "Évaluation des niveaux (indiv/collectif).",
        ],
        "Athlétisme — Course de vitesse": _SPRINT,
    },
    3: {
        "Basket-ball": [
            "Évaluer le niveau initial en situation de référence.",
            "Connaître définition, règles et bases techniques.",
            "Conserver la balle par passes et tenter un tir.",
            "Dribbler efficacement et tirer.",
            "Échanges en supériorité offensive et tir.",
            "Supériorité offensive : conclure par un tir.",
            "Montée rapide en égalité et marquer.",
            "Contre-attaque face à défense non organisée.",
            "Utiliser les couloirs latéraux.",
            "Fixer la défense et jouer ailleurs.",
            "Match dirigé d'intégration.",
            "Évaluation finale (indiv/collectif).",
        ],
    },
    4: {
        "Basket-ball": [
            "Observer le niveau initial.",
            "Règles/techniques/tactiques de base.",
            "Conserver la balle sous pression défensive.",
            "Dribbler efficacement et conclure par un tir.",
            "Échanges en supériorité offensive et tir.",
            "Maintenir la supériorité et conclure.",
            "Montée rapide vs défense non organisée.",
            "Contre-attaque et marquer.",
            "Utiliser les couloirs latéraux pour progresser.",
            "Fixer la défense et jouer ailleurs.",
            "Match dirigé (préparation évaluation).",
            "Évaluation des niveaux pratiques.",
        ],
    },
    5: {
        "Basket-ball": [
            "Détecter les niveaux (référence 5c5).",
            "Passes/réceptions en situations variées.",
            "Passes rapides + exploitation des couloirs.",
            "Passes correctes en mouvement vers l'avant.",
            "Dribbler des défenseurs en jeu collectif vers l'avant (espaces libres).",
            "Multiplier les échanges : passes au partenaire démarqué (appui/soutien).",
            "Montée rapide en créant/utilisant des espaces libres.",
            "Montée rapide par couloirs + tir.",
            "Organisation défensive (propre camp).",
            "Organisation offensive (créer l'incertitude).",
            "Occupation organisée de l'espace de jeu.",
            "Test bilan 5c5.",
        ],
    },
    6: {
        "Basket-ball": [
            "Test d'observation (détecter niveaux indiv/collectif).",
            "Séance théorique (règles/technique/tactique).",
            "Garder la balle par passes face à défense et tenter un tir.",
            "Dribbler et finir par un tir.",
            "Supériorité offensive : échanges + tir réussi.",
            "Supériorité offensive : échanges + tir réussi (suite).",
            "Égalité numérique : montée rapide vs défense non organisée.",
            "Contre-attaque vs défense non organisée.",
            "Égalité numérique : échanges collectifs en utilisant couloirs latéraux.",
            "Supériorité : projet collectif pour fixer la défense et jouer ailleurs.",
            "Match dirigé (préparation test).",
            "Test bilan (niveaux indiv/collectif).",
        ],
        "Gymnastique au sol": [
            "Évaluation diagnostique (fiche de niveau).",
            "Éléments A + liaisons.",
            "Consolider A.",
            "Éléments B.",
            "Consolider B.",
            "Éléments C avec aide/parade.",
            "Consolider C.",
            "Mini-enchaînement 2A+2B.",
            "Mini-enchaînement 2A+1B+1C.",
            "Enchaînement 2A+2B+1C.",
            "Préparer 2A+3B+2C.",
            "Évaluation finale (enchaînement complet).",
        ],
    },
}


def session_themes(level: Level, module: int, activity: str) -> List[str]:
    """
    Objectifs de séance pour une APS.
    Si le module n'a pas de contenu, on prend le premier module du niveau ;
    si l'APS n'existe pas dans le module, on prend la première APS disponible.
    """
    module_themes = THEMES.get(module)
    if not module_themes:
        fallback = next((m for m in LEVEL_MODULES.get(Level(level), []) if m in THEMES), None)
        module_themes = THEMES.get(fallback, {})
    if not module_themes:
        return []
    if activity in module_themes:
        return module_themes[activity]
    return next(iter(module_themes.values()))


def theme_for(themes: List[str], idx: int) -> str:
    """Thème de la séance `idx` ; au-delà de la liste, on répète le dernier objectif."""
    if idx < len(themes):
        return themes[idx]
    if themes:
        return themes[-1]
    return f"Séance {idx + 1}"


def curriculum_for(level: Level) -> List[dict]:
    """Modules d'un niveau avec leur intitulé et les APS disposant d'objectifs."""
    return [
        {"module": m, "name": MODULE_NAMES[m], "activities": sorted(THEMES.get(m, {}))}
        for m in LEVEL_MODULES[Level(level)]
    ]
