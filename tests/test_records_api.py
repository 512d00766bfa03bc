"""Testes dos cadastros consumidos pelo agendador (clientes, barbeiros, serviços)."""

from __future__ import annotations

from datetime import timedelta

from barbershop.core.dates import utcnow


def test_health(api) -> None:
    body = api.get("/health").json()

    assert body["status"] == "ok"
    assert body["timestamp"].endswith("Z")


def test_create_and_list_clients(api) -> None:
    first = api.post("/api/clients/", json={"name": "  Ana ", "phone": "11911112222"})
    assert first.status_code == 201
    assert first.json()["name"] == "Ana"
    assert first.json()["points"] == 0

    api.post("/api/clients/", json={"name": "Bruno"})

    names = [c["name"] for c in api.get("/api/clients/").json()]
    assert names == ["Bruno", "Ana"]


def test_client_requires_name(api) -> None:
    response = api.post("/api/clients/", json={"name": ""})

    assert response.status_code == 400
    assert response.json()["error"][0]["field"] == "name"


def test_client_points_increment(api, make_client) -> None:
    client = make_client(points=4)

    response = api.patch(f"/api/clients/{client.id}/points")

    assert response.status_code == 200
    assert response.json()["points"] == 5


def test_unknown_client_returns_404(api) -> None:
    response = api.get("/api/clients/321")

    assert response.status_code == 404
    assert response.json() == {"error": "Cliente não encontrado"}
    assert api.patch("/api/clients/321/points").status_code == 404


def test_create_barber_with_profile(api) -> None:
    response = api.post(
        "/api/barbers/",
        json={"name": "Carlos", "email": "Carlos@Barbearia.com", "specialties": ["Corte", " ", "Barba"]},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Carlos"
    assert body["email"] == "carlos@barbearia.com"
    assert body["specialties"] == ["Corte", "Barba"]
    assert body["available"] is True

    listed = api.get("/api/barbers/").json()
    assert [b["id"] for b in listed] == [body["id"]]
    assert api.get(f"/api/barbers/{body['id']}").json()["email"] == "carlos@barbearia.com"


def test_barber_email_must_be_unique(api) -> None:
    api.post("/api/barbers/", json={"name": "Carlos", "email": "carlos@barbearia.com"})

    response = api.post("/api/barbers/", json={"name": "Outro", "email": "carlos@barbearia.com"})

    assert response.status_code == 400
    assert response.json() == {"error": "Email já cadastrado"}


def test_unknown_barber_returns_404(api) -> None:
    assert api.get("/api/barbers/42").status_code == 404


def test_create_and_get_service(api) -> None:
    response = api.post("/api/services/", json={"name": "Corte", "price": 40, "duration": 30})

    assert response.status_code == 201
    service = response.json()
    assert service["price"] == 40.0

    assert api.get(f"/api/services/{service['id']}").json()["name"] == "Corte"
    assert [s["name"] for s in api.get("/api/services/").json()] == ["Corte"]


def test_service_rejects_negative_price(api) -> None:
    response = api.post("/api/services/", json={"name": "Corte", "price": -1, "duration": 30})

    assert response.status_code == 400
    assert response.json()["error"][0]["field"] == "price"


def test_unknown_service_returns_404(api) -> None:
    assert api.get("/api/services/9").status_code == 404


def _tomorrow() -> str:
    return (utcnow() + timedelta(days=1)).date().isoformat()


def test_update_barber_profile(api, make_barber) -> None:
    barber = make_barber()

    response = api.put(
        f"/api/barbers/{barber.id}",
        json={"name": "Carlos Souza", "email": "Souza@Barbearia.com", "specialties": ["Barba", ""]},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Carlos Souza"
    assert body["email"] == "souza@barbearia.com"
    assert body["specialties"] == ["Barba"]
    assert api.get(f"/api/barbers/{barber.id}").json()["name"] == "Carlos Souza"


def test_update_barber_keeps_own_email_but_not_anothers(api, make_barber) -> None:
    carlos = make_barber()
    make_barber(name="Rafa", email="rafa@barbearia.com")

    same = api.put(f"/api/barbers/{carlos.id}", json={"name": "Carlos", "email": "carlos@barbearia.com"})
    assert same.status_code == 200
    assert same.json()["specialties"] == []

    taken = api.put(f"/api/barbers/{carlos.id}", json={"name": "Carlos", "email": "rafa@barbearia.com"})
    assert taken.status_code == 400
    assert taken.json() == {"error": "Email já está em uso"}


def test_update_unknown_barber_returns_404(api) -> None:
    response = api.put("/api/barbers/42", json={"name": "X", "email": "x@barbearia.com"})

    assert response.status_code == 404
    assert response.json() == {"error": "Barbeiro não encontrado"}


def test_delete_barber_removes_profile(api, make_barber) -> None:
    barber = make_barber()

    assert api.delete(f"/api/barbers/{barber.id}").status_code == 204
    assert api.get(f"/api/barbers/{barber.id}").status_code == 404
    assert api.delete(f"/api/barbers/{barber.id}").status_code == 404

    # o email ficou livre junto com o usuário
    again = api.post("/api/barbers/", json={"name": "Carlos", "email": "carlos@barbearia.com"})
    assert again.status_code == 201


def test_barber_with_future_appointments_cannot_be_deleted(api, records, appointment_payload) -> None:
    assert api.post("/api/appointments/", json=appointment_payload(date=_tomorrow())).status_code == 201

    response = api.delete(f"/api/barbers/{records.barber.id}")

    assert response.status_code == 400
    assert response.json() == {"error": "Não é possível excluir um barbeiro com agendamentos futuros"}
    assert api.get(f"/api/barbers/{records.barber.id}").status_code == 200


def test_partial_service_update(api, make_service) -> None:
    service = make_service()

    response = api.put(f"/api/services/{service.id}", json={"price": 60, "description": "Com lavagem"})

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Corte"
    assert body["price"] == 60.0
    assert body["duration"] == 30
    assert body["description"] == "Com lavagem"


def test_service_update_validates_fields(api, make_service) -> None:
    service = make_service()

    response = api.put(f"/api/services/{service.id}", json={"duration": 0})

    assert response.status_code == 400
    assert response.json()["error"][0]["field"] == "duration"
    assert api.get(f"/api/services/{service.id}").json()["duration"] == 30


def test_update_unknown_service_returns_404(api) -> None:
    response = api.put("/api/services/9", json={"price": 10})

    assert response.status_code == 404
    assert response.json() == {"error": "Serviço não encontrado"}


def test_delete_service(api, make_service) -> None:
    service = make_service()

    assert api.delete(f"/api/services/{service.id}").status_code == 204
    assert api.get(f"/api/services/{service.id}").status_code == 404


def test_service_with_future_appointments_cannot_be_deleted(api, records, appointment_payload) -> None:
    assert api.post("/api/appointments/", json=appointment_payload(date=_tomorrow())).status_code == 201

    response = api.delete(f"/api/services/{records.service.id}")

    assert response.status_code == 400
    assert response.json() == {"error": "Não é possível excluir um serviço com agendamentos futuros"}
