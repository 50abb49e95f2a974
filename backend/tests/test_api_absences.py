"""
Tests d'intégration API pour les absences du professeur.
"""

from datetime import date
from unittest.mock import patch

from eps_planner.schemas.absence import Absence, AbsenceStatus, ApprovalResult
from eps_planner.services.absence_service import InvalidDateRange


def make_absence(**kwargs) -> Absence:
    return Absence(
        id=kwargs.get("id", "abs1"),
        start_date=kwargs.get("start_date", date(2025, 9, 8)),
        end_date=kwargs.get("end_date", date(2025, 9, 8)),
        status=kwargs.get("status", AbsenceStatus.PENDING),
    )


ABSENCE_BODY = {"start_date": "2025-09-08", "end_date": "2025-09-10", "type": "formation", "reason": "Stage"}


# ============================================================
# POST /api/v1/absences
# ============================================================

def test_create_absence_succes(client):
    with patch("eps_planner.routers.absences.absence_service.create_absence") as mock:
        mock.return_value = make_absence()
        response = client.post("/api/v1/absences", json=ABSENCE_BODY)

    assert response.status_code == 201
    assert response.json()["status"] == "en_attente"


def test_create_absence_dates_inversees(client):
    """Début postérieur à la fin → 422, le service n'est pas appelé."""
    with patch("eps_planner.routers.absences.absence_service.create_absence") as mock:
        response = client.post("/api/v1/absences", json={**ABSENCE_BODY, "end_date": "2025-09-01"})

    assert response.status_code == 422
    mock.assert_not_called()


def test_create_absence_type_inconnu(client):
    response = client.post("/api/v1/absences", json={**ABSENCE_BODY, "type": "vacances"})
    assert response.status_code == 422


# ============================================================
# Lecture
# ============================================================

def test_list_absences(client):
    with patch("eps_planner.routers.absences.absence_service.get_absences") as mock:
        mock.return_value = [make_absence(), make_absence(id="abs2")]
        response = client.get("/api/v1/absences")

    assert response.status_code == 200
    assert len(response.json()) == 2


def test_absences_en_cours(client):
    """La route /in-progress n'est pas capturée par /{absence_id}."""
    with patch("eps_planner.routers.absences.absence_service.get_absences_in_progress") as mock:
        mock.return_value = [make_absence(status=AbsenceStatus.APPROVED)]
        response = client.get("/api/v1/absences/in-progress")

    assert response.status_code == 200
    assert response.json()[0]["status"] == "approuve"


def test_get_absence_introuvable(client):
    with patch("eps_planner.routers.absences.absence_service.get_absence") as mock:
        mock.return_value = None
        response = client.get("/api/v1/absences/inconnue")

    assert response.status_code == 404


# ============================================================
# PUT /api/v1/absences/{absence_id}
# ============================================================

def test_update_absence_succes(client):
    with patch("eps_planner.routers.absences.absence_service.update_absence") as mock:
        mock.return_value = make_absence(end_date=date(2025, 9, 12))
        response = client.put("/api/v1/absences/abs1", json={"end_date": "2025-09-12"})

    assert response.status_code == 200
    assert response.json()["end_date"] == "2025-09-12"


def test_update_absence_plage_invalide(client):
    with patch("eps_planner.routers.absences.absence_service.update_absence") as mock:
        mock.side_effect = InvalidDateRange("La date de début doit être antérieure ou égale à la date de fin.")
        response = client.put("/api/v1/absences/abs1", json={"end_date": "2025-09-01"})

    assert response.status_code == 422


def test_update_absence_validee_dates_figees(client):
    with patch("eps_planner.routers.absences.absence_service.update_absence") as mock:
        mock.side_effect = ValueError("Impossible de modifier les dates d'une absence validée.")
        response = client.put("/api/v1/absences/abs1", json={"end_date": "2025-09-20"})

    assert response.status_code == 409


def test_update_absence_introuvable(client):
    with patch("eps_planner.routers.absences.absence_service.update_absence") as mock:
        mock.return_value = None
        response = client.put("/api/v1/absences/inconnue", json={"reason": "x"})

    assert response.status_code == 404


# ============================================================
# Validation / refus / suppression
# ============================================================

def test_approve_absence(client):
    with patch("eps_planner.routers.absences.absence_service.approve_absence") as mock:
        mock.return_value = ApprovalResult(
            absence_id="abs1",
            moved_count=2,
            unplaced_count=0,
            cycles_modified=["cycle1", "cycle2"],
            message="Planification ajustée : 2 séance(s) reportée(s).",
        )
        response = client.post("/api/v1/absences/abs1/approve")

    assert response.status_code == 200
    data = response.json()
    assert data["moved_count"] == 2
    assert data["cycles_modified"] == ["cycle1", "cycle2"]
    assert "reportée" in data["message"]


def test_approve_absence_introuvable(client):
    with patch("eps_planner.routers.absences.absence_service.approve_absence") as mock:
        mock.return_value = None
        response = client.post("/api/v1/absences/inconnue/approve")

    assert response.status_code == 404


def test_reject_absence(client):
    with patch("eps_planner.routers.absences.absence_service.reject_absence") as mock:
        mock.return_value = make_absence(status=AbsenceStatus.REJECTED)
        response = client.post("/api/v1/absences/abs1/reject")

    assert response.status_code == 200
    assert response.json()["status"] == "refuse"


def test_delete_absence(client):
    with patch("eps_planner.routers.absences.absence_service.delete_absence") as mock:
        mock.return_value = True
        response = client.delete("/api/v1/absences/abs1")

    assert response.status_code == 204


def test_delete_absence_introuvable(client):
    with patch("eps_planner.routers.absences.absence_service.delete_absence") as mock:
        mock.return_value = False
        response = client.delete("/api/v1/absences/inconnue")

    assert response.status_code == 404
