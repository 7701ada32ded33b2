"""Tests for the HTTP API."""

from uuid import uuid4

from fastapi.testclient import TestClient

from nutrilog.api.app import create_app
from nutrilog.containers import AppContainer
from tests.conftest import FakeFdcClient

OATS_PAYLOAD = {
    "name": "Rolled Oats",
    "calories": 150,
    "protein_g": 5,
    "carbs_g": 27,
    "total_fat_g": 3,
    "serving_size": "40g",
    "gram_weight": 40,
}


def test_health(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_barcode_lookup(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    found = client.get("/foods/barcode/051500255162")
    missing = client.get("/foods/barcode/5000112637922")

    assert found.status_code == 200
    assert found.json()["name"] == "Creamy Peanut Butter"
    assert found.json()["gram_weight"] == 32.0
    assert missing.status_code == 404


def test_food_search_and_detail(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    products = client.get("/foods/search", params={"q": "peanut"})
    foods = client.get("/foods/search", params={"q": "yogurt", "source": "foods"})
    short = client.get("/foods/search", params={"q": "pb"})
    detail = client.get("/foods/fdc/2345678")

    assert products.json()["results"][0]["name"] == "Creamy Peanut Butter"
    assert foods.json()["results"][0]["name"] == "GREEK YOGURT, PLAIN"
    assert short.json() == {"results": []}
    assert detail.json()["protein_g"] == 17.3


def test_unknown_fdc_food_is_not_found(
    container: AppContainer, fdc_client: FakeFdcClient
) -> None:
    fdc_client.food_payload = None
    client = TestClient(create_app(container))

    response = client.get("/foods/fdc/999999999")

    assert response.status_code == 404
    assert response.json() == {"detail": "Food not found"}


def test_serving_endpoints(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    scaled = client.post(
        "/servings/scale",
        json={
            "base": {"name": "Egg", "calories": 100, "protein_g": 5},
            "multiplier": 0.25,
        },
    )
    rejected = client.post(
        "/servings/scale", json={"base": {"calories": 100}, "multiplier": 0}
    )
    rescaled = client.post(
        "/servings/rescale",
        json={
            "record": {"calories": 300, "protein_g": 10},
            "multiplier": 2,
            "target_multiplier": 0.5,
        },
    )
    up = client.post("/servings/step", json={"multiplier": 1, "direction": "up"})
    down = client.post("/servings/step", json={"multiplier": 0.25, "direction": "down"})

    assert scaled.status_code == 200
    assert scaled.json()["calories"] == 25
    assert scaled.json()["protein_g"] == 1.3
    assert scaled.json()["serving_multiplier"] == 0.25
    assert rejected.status_code == 422
    assert rescaled.json()["calories"] == 75
    assert rescaled.json()["protein_g"] == 2.5
    assert up.json() == {"multiplier": 1.25}
    assert down.json() == {"multiplier": 0.25}


def test_totals_endpoint(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    record = client.post(
        "/totals",
        json={"records": [{"calories": 100}, {"calories": 150}, {"calories": 75}]},
    )
    whole = client.post(
        "/totals",
        json={
            "records": [{"protein_g": 1.26}, {"protein_g": 1.3}],
            "precision": "whole",
        },
    )
    empty = client.post("/totals", json={"records": []})

    assert record.json()["calories"] == 325
    assert whole.json()["protein_g"] == 3
    assert all(value == 0 for value in empty.json().values())


def test_meal_flow(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    user_id = uuid4()

    client.put(
        f"/users/{user_id}/goals",
        json={
            "calories": 600,
            "protein": 150,
            "carbs": 200,
            "fats": 65,
            "day": "2024-05-01",
        },
    )
    created = client.post(
        f"/users/{user_id}/meals",
        json={"day": "2024-05-01", "hour": 8, "base": OATS_PAYLOAD, "multiplier": 1.5},
    )
    meal_id = created.json()["id"]
    edit = client.get(f"/meals/{meal_id}/edit")
    patched = client.patch(f"/meals/{meal_id}", json={"multiplier": 2})
    meals = client.get(f"/users/{user_id}/meals", params={"day": "2024-05-01"})
    summary = client.get(f"/users/{user_id}/summary", params={"day": "2024-05-01"})
    recent = client.get(f"/users/{user_id}/recent-foods")

    assert created.status_code == 201
    assert created.json()["nutrition"]["calories"] == 225
    assert created.json()["nutrition"]["protein_g"] == 8
    assert edit.json()["multiplier"] == 1.5
    assert edit.json()["base"]["calories"] == 150
    assert patched.json()["nutrition"]["calories"] == 300
    assert len(meals.json()["meals"]) == 1
    assert summary.json()["totals"]["calories"] == 300
    assert summary.json()["hourly"]["8"]["calories"] == 300
    assert summary.json()["progress"]["calories"]["percentage"] == 50.0
    assert recent.json()["foods"][0]["calories"] == 150

    deleted = client.delete(f"/meals/{meal_id}")
    deleted_again = client.delete(f"/meals/{meal_id}")

    assert deleted.status_code == 200
    assert deleted_again.status_code == 404


def test_meal_validation_and_missing_meals(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    bad_hour = client.post(
        f"/users/{uuid4()}/meals",
        json={"day": "2024-05-01", "hour": 24, "base": OATS_PAYLOAD},
    )
    missing_edit = client.get(f"/meals/{uuid4()}/edit")
    missing_patch = client.patch(f"/meals/{uuid4()}", json={"multiplier": 2})

    assert bad_hour.status_code == 422
    assert missing_edit.status_code == 404
    assert missing_patch.status_code == 404


def test_summary_without_goals(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    summary = client.get(f"/users/{uuid4()}/summary", params={"day": "2024-05-01"})

    assert summary.status_code == 200
    assert summary.json()["progress"] is None
    assert summary.json()["hourly"] == {}


def test_recipe_flow(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    user_id = uuid4()

    created = client.post(
        f"/users/{user_id}/recipes",
        json={
            "name": "Big oats",
            "ingredients": [
                {"base": OATS_PAYLOAD, "multiplier": 2},
                {"base": {"name": "Honey", "calories": 64, "sugars_g": 17.3}},
            ],
        },
    )
    recipe_id = created.json()["id"]
    listed = client.get(f"/users/{user_id}/recipes")
    food = client.get(f"/recipes/{recipe_id}/food")
    invalid = client.post(
        f"/users/{user_id}/recipes", json={"name": " ", "ingredients": []}
    )
    missing = client.get(f"/recipes/{uuid4()}/food")

    assert created.status_code == 201
    assert created.json()["totals"]["calories"] == 364
    assert [recipe["name"] for recipe in listed.json()["recipes"]] == ["Big oats"]
    assert food.json()["calories"] == 364
    assert food.json()["sugars_g"] == 17.3
    assert invalid.status_code == 400
    assert missing.status_code == 404


def test_recipe_update_and_delete(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    user_id = uuid4()
    created = client.post(
        f"/users/{user_id}/recipes",
        json={"name": "Oats", "ingredients": [{"base": OATS_PAYLOAD}]},
    )
    recipe_id = created.json()["id"]

    updated = client.put(
        f"/recipes/{recipe_id}",
        json={
            "name": "Double oats",
            "ingredients": [{"base": OATS_PAYLOAD, "multiplier": 2}],
        },
    )
    emptied = client.put(
        f"/recipes/{recipe_id}", json={"name": "Oats", "ingredients": []}
    )
    unknown = client.put(
        f"/recipes/{uuid4()}",
        json={"name": "Oats", "ingredients": [{"base": OATS_PAYLOAD}]},
    )

    assert updated.status_code == 200
    assert updated.json()["id"] == recipe_id
    assert updated.json()["user_id"] == str(user_id)
    assert updated.json()["name"] == "Double oats"
    assert updated.json()["totals"]["calories"] == 300
    assert emptied.status_code == 400
    assert unknown.status_code == 404

    deleted = client.delete(f"/recipes/{recipe_id}")
    listed = client.get(f"/users/{user_id}/recipes")
    again = client.delete(f"/recipes/{recipe_id}")

    assert deleted.json() == {"status": "deleted"}
    assert listed.json() == {"recipes": []}
    assert again.status_code == 404
