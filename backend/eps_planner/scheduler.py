"""
Planificateur APScheduler pour le verrouillage automatique des séances passées.

Le job s'exécute à intervalle régulier et verrouille les séances dont la date
est dépassée : une séance réalisée ne doit plus être reportée par une absence.
"""

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from eps_planner.config import settings
from eps_planner.database import SessionLocal

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def _lock_past_sessions_scheduled() -> None:
    """
    Tâche planifiée : verrouille les séances passées de tous les cycles.
    Import local pour éviter les imports circulaires.
    """
    from eps_planner.services.session_service import lock_past_sessions
    from eps_planner.store import SqlDocumentStore

    db = SessionLocal()
    try:
        locked = lock_past_sessions(SqlDocumentStore(db))
        logger.info("Verrouillage automatique : %d séance(s) verrouillée(s)", locked)
    except Exception as exc:
        logger.error("Erreur lors du verrouillage automatique des séances : %s", exc)
    finally:
        db.close()


def start_scheduler() -> None:
    """Démarre le planificateur en arrière-plan (appelé au démarrage de l'API)."""
    scheduler.add_job(
        _lock_past_sessions_scheduled,
        trigger="interval",
        hours=settings.LOCK_JOB_INTERVAL_HOURS,
        id="lock_past_sessions",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        "Scheduler démarré — verrouillage des séances passées toutes les %d heures.",
        settings.LOCK_JOB_INTERVAL_HOURS,
    )


def stop_scheduler() -> None:
    """Arrête le planificateur proprement (appelé à l'arrêt de l'API)."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler arrêté.")
