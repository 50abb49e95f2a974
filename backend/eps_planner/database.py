"""
Configuration de la connexion à la base de données.
Utilise SQLAlchemy avec un moteur synchrone ; l'état applicatif est stocké
comme un document JSON unique (voir eps_planner.store).
"""

from fastapi import Depends
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import Session, sessionmaker

from eps_planner.config import settings

# SQLite refuse par défaut le partage de connexion entre threads (scheduler + API)
_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dépendance FastAPI — fournit une session BDD et la ferme après usage."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_store(db: Session = Depends(get_db)):
    """Dépendance FastAPI — fournit le magasin d'état adossé à la session BDD."""
    from eps_planner.store import SqlDocumentStore

    return SqlDocumentStore(db)
