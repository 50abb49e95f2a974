"""
Magasin d'état : lecture et écriture atomiques du document complet.

Chaque opération métier suit la discipline « lire tout l'état, calculer le
nouvel état, écrire tout l'état ». Aucun état global : le magasin est injecté
dans les services (dépendance FastAPI `get_store`).
"""

import logging
from typing import Optional, Protocol

from sqlalchemy.orm import Session

from eps_planner.config import settings
from eps_planner.models.document import Document
from eps_planner.schemas.state import EpsState

logger = logging.getLogger(__name__)


class StateStore(Protocol):
    def load(self) -> EpsState: ...

    def save(self, state: EpsState) -> None: ...


class InMemoryStore:
    """Magasin en mémoire (tests, scripts). Conserve une copie profonde de l'état."""

    def __init__(self, state: Optional[EpsState] = None):
        self._state = (state or EpsState()).model_copy(deep=True)

    def load(self) -> EpsState:
        return self._state.model_copy(deep=True)

    def save(self, state: EpsState) -> None:
        self._state = state.model_copy(deep=True)


class SqlDocumentStore:
    """Magasin adossé à la table `documents` (document JSON unique par clé)."""

    def __init__(self, db: Session, key: Optional[str] = None):
        self.db = db
        self.key = key or settings.STATE_DOCUMENT_KEY

    def load(self) -> EpsState:
        document = self.db.get(Document, self.key)
        if document is None:
            return EpsState()
        return EpsState.model_validate(document.payload)

    def save(self, state: EpsState) -> None:
        payload = state.model_dump(mode="json")
        document = self.db.get(Document, self.key)
        if document is None:
            self.db.add(Document(key=self.key, payload=payload))
        else:
            document.payload = payload
        self.db.commit()
        logger.debug(
            "Document %s enregistré : %d classes, %d cycles, %d absences",
            self.key, len(state.classes), len(state.cycles), len(state.absences),
        )
