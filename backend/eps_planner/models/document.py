"""
Modèle SQLAlchemy du document d'état.

L'application persiste tout son état (classes, élèves, cycles, absences,
évaluations) sous forme d'un document JSON unique, lu et écrit en entier.
"""

from sqlalchemy import JSON, Column, DateTime, String, func

from eps_planner.database import Base


class Document(Base):
    """Document JSON identifié par une clé (ex. "eps:data")."""
    __tablename__ = "documents"

    key = Column(String(100), primary_key=True)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
