"""
Tests d'intégration API pour les classes EPS et leurs élèves.
Testent les URLs, les codes HTTP, la validation et le format des réponses.
"""

from unittest.mock import patch

from eps_planner.schemas.school_class import ClassResponse, Level, Student, TimeSlot


# --- Helpers ---

def make_class_response(**kwargs) -> ClassResponse:
    return ClassResponse(
        id=kwargs.get("id", "classe1"),
        name=kwargs.get("name", "TC A"),
        level=kwargs.get("level", Level.TC),
        time_slots=kwargs.get("time_slots", [TimeSlot(weekday=1, start="09:30")]),
        nb_students=kwargs.get("nb_students", 0),
        nb_cycles=kwargs.get("nb_cycles", 0),
    )


def make_student(**kwargs) -> Student:
    return Student(
        id=kwargs.get("id", "e1"),
        class_id="classe1",
        last_name=kwargs.get("last_name", "Alaoui"),
        level=Level.TC,
    )


CLASS_BODY = {"name": "TC A", "level": "TC", "time_slots": [{"weekday": 1, "start": "09:30"}]}


# ============================================================
# POST /api/v1/classes
# ============================================================

def test_create_class_succes(client):
    """Création d'une classe valide → 201."""
    with patch("eps_planner.routers.classes.class_service.create_class") as mock:
        mock.return_value = make_class_response()

        response = client.post("/api/v1/classes", json=CLASS_BODY)

    assert response.status_code == 201
    assert response.json()["name"] == "TC A"
    assert response.json()["time_slots"][0]["duration_min"] == 60
    assert response.json()["nb_cycles"] == 0


def test_create_class_nom_vide(client):
    """Nom vide → 422."""
    response = client.post("/api/v1/classes", json={**CLASS_BODY, "name": "   "})
    assert response.status_code == 422


def test_create_class_niveau_inconnu(client):
    response = client.post("/api/v1/classes", json={**CLASS_BODY, "level": "CM2"})
    assert response.status_code == 422


def test_create_class_horaire_invalide(client):
    """Heure hors format HH:MM → 422."""
    response = client.post("/api/v1/classes", json={**CLASS_BODY, "time_slots": [{"weekday": 1, "start": "9h"}]})
    assert response.status_code == 422


def test_create_class_nom_duplique(client):
    """Nom déjà existant → 409 Conflict."""
    with patch("eps_planner.routers.classes.class_service.create_class") as mock:
        mock.side_effect = ValueError("Une classe avec le nom 'TC A' existe déjà.")

        response = client.post("/api/v1/classes", json=CLASS_BODY)

    assert response.status_code == 409
    assert "existe déjà" in response.json()["detail"]


def test_create_class_body_manquant(client):
    """Requête sans body → 422."""
    response = client.post("/api/v1/classes")
    assert response.status_code == 422


# ============================================================
# GET /api/v1/classes
# ============================================================

def test_list_classes_succes(client):
    with patch("eps_planner.routers.classes.class_service.get_classes") as mock:
        mock.return_value = [make_class_response(), make_class_response(id="c2", name="TC B")]
        response = client.get("/api/v1/classes")

    assert response.status_code == 200
    assert len(response.json()) == 2
    assert "nb_students" in response.json()[0]


def test_list_classes_vide(client):
    with patch("eps_planner.routers.classes.class_service.get_classes") as mock:
        mock.return_value = []
        response = client.get("/api/v1/classes")

    assert response.status_code == 200
    assert response.json() == []


# ============================================================
# GET / PUT / DELETE /api/v1/classes/{class_id}
# ============================================================

def test_get_class_succes(client):
    with patch("eps_planner.routers.classes.class_service.get_class") as mock:
        mock.return_value = make_class_response(name="1BAC SE", level=Level.FIRST_YEAR)
        response = client.get("/api/v1/classes/classe1")

    assert response.status_code == 200
    assert response.json()["level"] == "1ère Bac"


def test_get_class_introuvable(client):
    with patch("eps_planner.routers.classes.class_service.get_class") as mock:
        mock.return_value = None
        response = client.get("/api/v1/classes/inconnue")

    assert response.status_code == 404


def test_update_class_succes(client):
    with patch("eps_planner.routers.classes.class_service.update_class") as mock:
        mock.return_value = make_class_response(name="TC Sciences")
        response = client.put("/api/v1/classes/classe1", json={"name": "TC Sciences"})

    assert response.status_code == 200
    assert response.json()["name"] == "TC Sciences"


def test_update_class_nom_duplique(client):
    with patch("eps_planner.routers.classes.class_service.update_class") as mock:
        mock.side_effect = ValueError("Une classe avec ce nom existe déjà.")
        response = client.put("/api/v1/classes/classe1", json={"name": "TC B"})

    assert response.status_code == 409


def test_update_class_introuvable(client):
    with patch("eps_planner.routers.classes.class_service.update_class") as mock:
        mock.return_value = None
        response = client.put("/api/v1/classes/inconnue", json={"name": "TC B"})

    assert response.status_code == 404


def test_delete_class_succes(client):
    with patch("eps_planner.routers.classes.class_service.delete_class") as mock:
        mock.return_value = True
        response = client.delete("/api/v1/classes/classe1")

    assert response.status_code == 204


def test_delete_class_introuvable(client):
    with patch("eps_planner.routers.classes.class_service.delete_class") as mock:
        mock.return_value = False
        response = client.delete("/api/v1/classes/inconnue")

    assert response.status_code == 404


# ============================================================
# Élèves
# ============================================================

def test_add_student_succes(client):
    with patch("eps_planner.routers.classes.class_service.add_student") as mock:
        mock.return_value = make_student()
        response = client.post("/api/v1/classes/classe1/students", json={"last_name": "Alaoui"})

    assert response.status_code == 201
    assert response.json()["class_id"] == "classe1"


def test_add_student_classe_introuvable(client):
    with patch("eps_planner.routers.classes.class_service.add_student") as mock:
        mock.side_effect = ValueError("Classe introuvable.")
        response = client.post("/api/v1/classes/inconnue/students", json={"last_name": "Alaoui"})

    assert response.status_code == 404


def test_add_student_numero_invalide(client):
    response = client.post("/api/v1/classes/classe1/students", json={"last_name": "Alaoui", "number": 0})
    assert response.status_code == 422


def test_list_students_actifs(client):
    with patch("eps_planner.routers.classes.class_service.get_students") as mock:
        mock.return_value = [make_student()]
        response = client.get("/api/v1/classes/classe1/students?active_only=true")

    assert response.status_code == 200
    assert mock.call_args.kwargs["active_only"] is True


def test_update_student_introuvable(client):
    with patch("eps_planner.routers.classes.class_service.update_student") as mock:
        mock.return_value = None
        response = client.put("/api/v1/classes/students/inconnu", json={"active": False})

    assert response.status_code == 404


def test_delete_student_succes(client):
    with patch("eps_planner.routers.classes.class_service.delete_student") as mock:
        mock.return_value = True
        response = client.delete("/api/v1/classes/students/e1")

    assert response.status_code == 204
