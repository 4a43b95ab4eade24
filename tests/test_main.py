from datetime import date, timedelta
from decimal import Decimal


def create_user(client, email="test@example.com"):
    r = client.post("/users/", json={"name": "Test User", "email": email})
    assert r.status_code == 200
    return r.json()["id"]


def create_book(client, external_id=258027, copies=1, daily_rate="15.99"):
    book = {"external_id": external_id, "title": "Test Book", "author": "Author",
            "daily_rate": daily_rate, "copies_total": copies}
    r = client.post("/books/", json=book)
    assert r.status_code == 200
    return r.json()


def reserve(client, user_id, external_id=258027, rental_days=7, start_date=None):
    body = {"user_id": user_id, "book_external_id": external_id, "rental_days": rental_days}
    if start_date:
        body["start_date"] = start_date.isoformat()
    return client.post("/reservations/", json=body)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_create_user_and_book_and_reserve_return(client):
    user_id = create_user(client)
    book = create_book(client)
    assert book["copies_available"] == 1

    r = reserve(client, user_id)
    assert r.status_code == 200
    res = r.json()
    assert res["status"] == "ACTIVE"
    assert Decimal(str(res["total_fee"])) == Decimal("111.93")
    assert res["start_date"] == date.today().isoformat()
    assert client.get("/books/258027").json()["copies_available"] == 0

    late = date.fromisoformat(res["expected_return_date"]) + timedelta(days=3)
    r = client.post(f"/reservations/{res['id']}/return", json={"return_date": late.isoformat()})
    assert r.status_code == 200
    assert r.json()["status"] == "OVERDUE"
    assert Decimal(str(r.json()["late_fee"])) == Decimal("7.20")
    assert client.get("/books/258027").json()["copies_available"] == 1


def test_return_defaults_to_today(client):
    user_id = create_user(client)
    create_book(client)
    res = reserve(client, user_id).json()

    r = client.post(f"/reservations/{res['id']}/return")
    assert r.status_code == 200
    assert r.json()["status"] == "RETURNED"
    assert r.json()["actual_return_date"] == date.today().isoformat()


def test_error_kinds_are_translated(client):
    user_id = create_user(client)
    create_book(client)
    res = reserve(client, user_id).json()

    r = reserve(client, user_id)
    assert r.status_code == 409
    assert r.json()["code"] == "no_copies_available"

    r = reserve(client, 999)
    assert r.status_code == 404
    assert r.json()["code"] == "user_not_found"

    r = reserve(client, user_id, external_id=1)
    assert r.status_code == 404
    assert r.json()["code"] == "book_not_found"

    create_book(client, external_id=2)
    r = reserve(client, user_id, external_id=2, rental_days=0)
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_rental_period"

    r = reserve(client, user_id, external_id=2, rental_days=10 ** 7)
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_rental_period"

    early = date.fromisoformat(res["start_date"]) - timedelta(days=1)
    r = client.post(f"/reservations/{res['id']}/return", json={"return_date": early.isoformat()})
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_return_date"

    assert client.post(f"/reservations/{res['id']}/return", json={}).status_code == 200
    r = client.post(f"/reservations/{res['id']}/return", json={})
    assert r.status_code == 409
    assert r.json()["code"] == "already_returned"

    r = client.get("/reservations/12345")
    assert r.status_code == 404
    assert r.json()["reservation_id"] == "12345"


def test_duplicates_are_rejected(client):
    create_user(client)
    r = client.post("/users/", json={"name": "Other", "email": "test@example.com"})
    assert r.status_code == 400

    create_book(client)
    r = client.post("/books/", json={"external_id": 258027, "title": "Again", "daily_rate": "1.00"})
    assert r.status_code == 400


def test_reservation_queries(client):
    user_id = create_user(client)
    create_book(client, copies=3)
    today = date.today()
    late = reserve(client, user_id, start_date=today - timedelta(days=10)).json()
    current = reserve(client, user_id, start_date=today).json()

    r = client.get("/reservations/overdue")
    assert [x["id"] for x in r.json()] == [late["id"]]
    assert r.json()[0]["status"] == "ACTIVE"

    assert len(client.get("/reservations/").json()) == 2
    assert len(client.get("/reservations/active").json()) == 2
    assert len(client.get(f"/reservations/user/{user_id}").json()) == 2
    assert len(client.get(f"/reservations/user/{user_id}/active").json()) == 2
    assert len(client.get("/reservations/book/258027").json()) == 2
    assert client.get("/reservations/status/RETURNED").json() == []

    r = client.get("/reservations/range", params={"start": today.isoformat(), "end": today.isoformat()})
    assert [x["id"] for x in r.json()] == [current["id"]]

    assert client.get(f"/reservations/{current['id']}").json()["id"] == current["id"]
