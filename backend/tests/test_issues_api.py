"""API tests for /api/v1/issues."""
import pytest

from app.models import Issue

API = "/api/v1/issues"


def auth(user) -> dict:
    return {"X-User-Id": user.id}


@pytest.fixture
def payload():
    return {
        "title": "Large pothole on Main Street",
        "description": "Deep pothole near Oak Avenue damaging cars.",
        "category": "roads",
        "location": {"latitude": 40.7128, "longitude": -74.0060, "address": "Main St"},
    }


class TestListIssues:
    def test_radius_search_returns_distance(self, client, make_issue):
        issue = make_issue(40.7128, -74.0060)
        make_issue(41.5, -74.0)

        res = client.get(API, params={"latitude": 40.7589, "longitude": -73.9851, "radius": 6})

        assert res.status_code == 200
        body = res.json()
        assert [i["id"] for i in body["items"]] == [issue.id]
        assert body["items"][0]["distance"] == pytest.approx(5.42, abs=0.05)
        assert body["items"][0]["location"]["latitude"] == 40.7128
        assert body["pagination"] == {"page": 1, "limit": 20, "total": 1, "pages": 1}

    def test_excluded_at_smaller_radius(self, client, make_issue):
        make_issue(40.7128, -74.0060)

        res = client.get(API, params={"latitude": 40.7589, "longitude": -73.9851, "radius": 5})

        assert res.json()["items"] == []

    def test_list_without_center(self, client, make_issue):
        make_issue()
        make_issue(is_hidden=True)

        body = client.get(API).json()

        assert body["pagination"]["total"] == 1
        assert body["items"][0]["distance"] is None
        assert body["items"][0]["reporter_name"] == "Anonymous"

    def test_radius_out_of_range_is_400(self, client):
        res = client.get(API, params={"latitude": 40.0, "longitude": -74.0, "radius": 20})

        assert res.status_code == 400
        assert res.json()["error"] == "Invalid Argument"

    def test_limit_above_max_is_400(self, client):
        assert client.get(API, params={"limit": 51}).status_code == 400

    def test_latitude_without_longitude_is_400(self, client):
        assert client.get(API, params={"latitude": 40.0}).status_code == 400

    def test_latitude_out_of_range_is_422(self, client):
        assert client.get(API, params={"latitude": 95, "longitude": 0}).status_code == 422

    def test_unknown_category_is_400(self, client):
        res = client.get(API, params={"category": "potholes"})

        assert res.status_code == 400
        assert "all" in res.json()["details"]["allowed"]


class TestCreateAndRead:
    def test_create_anonymous(self, client, payload):
        res = client.post(API, json=payload)

        assert res.status_code == 201
        issue = res.json()["issue"]
        assert issue["status"] == "reported"
        assert issue["reporter_name"] == "Anonymous"
        assert issue["status_logs"][0]["updated_by_name"] == "System"

    def test_create_as_user(self, client, make_user, payload):
        user = make_user("Jane")

        res = client.post(API, json=payload, headers=auth(user))

        issue = res.json()["issue"]
        assert issue["reporter_id"] == user.id
        assert issue["reporter_name"] == "Jane"

    def test_create_as_user_marked_anonymous(self, client, make_user, payload):
        res = client.post(API, json={**payload, "is_anonymous": True}, headers=auth(make_user()))

        issue = res.json()["issue"]
        assert issue["reporter_id"] is None
        assert issue["reporter_name"] == "Anonymous"

    def test_create_validates_body(self, client, payload):
        res = client.post(API, json={**payload, "category": "potholes"})

        assert res.status_code == 422

    def test_unknown_user_header_is_401(self, client, payload):
        res = client.post(API, json=payload, headers={"X-User-Id": "nobody"})

        assert res.status_code == 401

    def test_get_issue_detail(self, client, payload):
        created = client.post(API, json=payload).json()["issue"]

        res = client.get(f"{API}/{created['id']}")

        assert res.status_code == 200
        assert res.json()["title"] == payload["title"]
        assert len(res.json()["status_logs"]) == 1

    def test_get_missing_issue_is_404(self, client):
        res = client.get(f"{API}/missing")

        assert res.status_code == 404
        assert res.json()["path"] == f"{API}/missing"

    def test_stats_overview(self, client, make_issue):
        make_issue(category="water_supply", status="resolved")

        body = client.get(f"{API}/stats/overview").json()

        assert body["overview"]["resolved"] == 1
        assert body["by_category"] == [
            {"category": "water_supply", "count": 1, "resolved_count": 1}
        ]


class TestStatusUpdate:
    def test_admin_updates_status(self, client, make_user, make_issue):
        admin = make_user("Admin", is_admin=True)
        issue = make_issue()

        res = client.put(
            f"{API}/{issue.id}/status",
            json={"status": "resolved", "comment": "Fixed"},
            headers=auth(admin),
        )

        assert res.status_code == 200
        assert res.json()["status"] == "resolved"
        logs = client.get(f"{API}/{issue.id}").json()["status_logs"]
        assert logs[0]["updated_by_name"] == "Admin"

    def test_non_admin_is_403(self, client, make_user, make_issue):
        issue = make_issue()

        res = client.put(f"{API}/{issue.id}/status", json={"status": "resolved"}, headers=auth(make_user()))

        assert res.status_code == 403

    def test_anonymous_is_401(self, client, make_issue):
        issue = make_issue()

        assert client.put(f"{API}/{issue.id}/status", json={"status": "resolved"}).status_code == 401


class TestFlagging:
    def test_three_flags_hide_issue(self, client, db, make_user, make_issue):
        issue = make_issue(reporter=make_user())
        users = [make_user() for _ in range(3)]

        results = [
            client.post(f"{API}/{issue.id}/flag", json={"reason": "spam"}, headers=auth(u)).json()
            for u in users
        ]

        assert [r["flag_count"] for r in results] == [1, 2, 3]
        assert [r["is_hidden"] for r in results] == [False, False, True]
        assert client.get(f"{API}/{issue.id}").status_code == 404
        db.expire_all()
        assert db.get(Issue, issue.id).is_hidden is True

    def test_flag_without_body(self, client, make_user, make_issue):
        issue = make_issue()

        res = client.post(f"{API}/{issue.id}/flag", headers=auth(make_user()))

        assert res.status_code == 200
        assert res.json()["success"] is True

    def test_duplicate_flag_is_409(self, client, make_user, make_issue):
        issue = make_issue()
        user = make_user()
        client.post(f"{API}/{issue.id}/flag", json={}, headers=auth(user))

        res = client.post(f"{API}/{issue.id}/flag", json={}, headers=auth(user))

        assert res.status_code == 409
        assert res.json()["error"] == "Conflict"

    def test_self_flag_is_403(self, client, make_user, make_issue):
        reporter = make_user()
        issue = make_issue(reporter=reporter)

        res = client.post(f"{API}/{issue.id}/flag", json={}, headers=auth(reporter))

        assert res.status_code == 403

    def test_missing_issue_is_404(self, client, make_user):
        res = client.post(f"{API}/missing/flag", json={}, headers=auth(make_user()))

        assert res.status_code == 404

    def test_requires_identity(self, client, make_issue):
        issue = make_issue()

        assert client.post(f"{API}/{issue.id}/flag", json={}).status_code == 401

    def test_banned_user_is_403(self, client, make_user, make_issue):
        issue = make_issue()

        res = client.post(f"{API}/{issue.id}/flag", json={}, headers=auth(make_user(is_banned=True)))

        assert res.status_code == 403

    def test_reason_too_long_is_422(self, client, make_user, make_issue):
        issue = make_issue()

        res = client.post(f"{API}/{issue.id}/flag", json={"reason": "x" * 201}, headers=auth(make_user()))

        assert res.status_code == 422


class TestVoting:
    def test_vote_toggle_and_switch(self, client, make_user, make_issue):
        issue = make_issue(reporter=make_user())
        voter = make_user()
        url = f"{API}/{issue.id}/vote"

        added = client.post(url, json={"type": "upvote"}, headers=auth(voter)).json()
        switched = client.post(url, json={"type": "downvote"}, headers=auth(voter)).json()
        removed = client.post(url, json={"type": "downvote"}, headers=auth(voter)).json()

        assert (added["action"], added["upvotes"], added["downvotes"]) == ("added", 1, 0)
        assert (switched["action"], switched["upvotes"], switched["downvotes"]) == ("updated", 0, 1)
        assert (removed["action"], removed["upvotes"], removed["downvotes"]) == ("removed", 0, 0)
        assert added["message"] == "Vote added successfully"

    def test_counts_in_listing(self, client, make_user, make_issue):
        issue = make_issue()
        for _ in range(2):
            client.post(f"{API}/{issue.id}/vote", json={"type": "upvote"}, headers=auth(make_user()))

        item = client.get(API).json()["items"][0]

        assert (item["upvotes"], item["downvotes"]) == (2, 0)

    def test_self_vote_is_403(self, client, make_user, make_issue):
        reporter = make_user()
        issue = make_issue(reporter=reporter)

        res = client.post(f"{API}/{issue.id}/vote", json={"type": "upvote"}, headers=auth(reporter))

        assert res.status_code == 403

    def test_missing_issue_is_404(self, client, make_user):
        res = client.post(f"{API}/missing/vote", json={"type": "upvote"}, headers=auth(make_user()))

        assert res.status_code == 404

    def test_requires_identity(self, client, make_issue):
        issue = make_issue()

        assert client.post(f"{API}/{issue.id}/vote", json={"type": "upvote"}).status_code == 401

    def test_unknown_vote_type_is_422(self, client, make_user, make_issue):
        issue = make_issue()

        res = client.post(f"{API}/{issue.id}/vote", json={"type": "meh"}, headers=auth(make_user()))

        assert res.status_code == 422
