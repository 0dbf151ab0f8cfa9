def test_settings_default(api_client, auth_headers):
    response = api_client.get("/settings/", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {
        "reminder_interval_minutes": 30,
        "active_hours_only": True,
        "aggressive_mode": False,
        "notifications_enabled": False,
    }


def test_partial_settings_update(api_client, auth_headers):
    response = api_client.put("/settings/", json={"aggressive_mode": True, "reminder_interval_minutes": 10}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["aggressive_mode"] is True

    data = api_client.get("/settings/", headers=auth_headers).json()
    assert data["reminder_interval_minutes"] == 10
    assert data["active_hours_only"] is True


def test_non_positive_interval_rejected(api_client, auth_headers):
    response = api_client.put("/settings/", json={"reminder_interval_minutes": 0}, headers=auth_headers)
    assert response.status_code == 422


def test_streak_write_back(api_client, auth_headers):
    response = api_client.put("/stats/streak", json={"count": 4, "last_completed_date": "2024-01-05"}, headers=auth_headers)
    assert response.status_code == 200
    assert api_client.get("/stats/", headers=auth_headers).json() == {
        "count": 4, "last_completed_date": "2024-01-05"
    }
