"""Tests for the offer endpoints."""

from unittest.mock import Mock
from uuid import uuid4

from fastapi.testclient import TestClient

from home_market.enums.offer import OfferStatus
from home_market.services.exceptions import StoreUnavailable
from home_market.services.offer_service import DRAFT_ITEM_FAILED_WARNING, OfferService


OFFER_BODY = {
    "item_name": "Old bicycle",
    "description": "Blue, 21 gears",
    "expected_price": 50.0,
    "condition": "used",
    "location": "Bandung",
}


class TestOfferEndpoints:
    """Offer lifecycle over HTTP."""

    def test_giver_creates_offer(self, client: TestClient, auth_headers, giver, seller):
        response = client.post(
            "/api/offers",
            json={**OFFER_BODY, "seller_id": str(seller.id)},
            headers=auth_headers(giver),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["offer"]["status"] == "pending"
        assert data["offer"]["seller_id"] == str(seller.id)
        assert data["offer"]["agreed_price"] is None

    def test_buyer_cannot_create_offer(self, client: TestClient, auth_headers, buyer):
        response = client.post("/api/offers", json=OFFER_BODY, headers=auth_headers(buyer))

        assert response.status_code == 403
        assert response.json()["error"] == "role_denied"

    def test_missing_field_is_bad_request(self, client: TestClient, auth_headers, giver):
        body = {k: v for k, v in OFFER_BODY.items() if k != "condition"}

        response = client.post("/api/offers", json=body, headers=auth_headers(giver))

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_negative_expected_price(self, client: TestClient, auth_headers, giver):
        response = client.post(
            "/api/offers", json={**OFFER_BODY, "expected_price": -1}, headers=auth_headers(giver)
        )

        assert response.status_code == 400

    def test_accept_returns_draft_item(self, client: TestClient, auth_headers, factory, giver, seller, shop):
        offer = factory.offer(giver, seller=seller)

        response = client.post(
            f"/api/offers/{offer.id}/accept", json={"agreed_price": 40.0}, headers=auth_headers(seller)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["offer"]["status"] == "accepted"
        assert data["offer"]["agreed_price"] == 40.0
        assert data["draft_item"]["status"] == "draft"
        assert data["draft_item"]["shop_id"] == str(shop.id)
        assert data["warning"] is None

    def test_second_decision_conflicts(self, client: TestClient, auth_headers, factory, giver, seller):
        offer = factory.offer(giver, seller=seller)
        headers = auth_headers(seller)
        client.post(f"/api/offers/{offer.id}/accept", json={"agreed_price": 40.0}, headers=headers)

        response = client.post(f"/api/offers/{offer.id}/reject", headers=headers)

        assert response.status_code == 409
        assert response.json()["error"] == "offer_status_conflict"

    def test_other_seller_is_forbidden(self, client: TestClient, auth_headers, factory, giver, seller):
        intruder = factory.seller()
        offer = factory.offer(giver, seller=seller)

        response = client.post(f"/api/offers/{offer.id}/reject", headers=auth_headers(intruder))

        assert response.status_code == 403
        assert response.json()["error"] == "not_seller_or_owner"

    def test_unknown_offer(self, client: TestClient, auth_headers, seller):
        response = client.post(
            f"/api/offers/{uuid4()}/accept", json={"agreed_price": 10.0}, headers=auth_headers(seller)
        )

        assert response.status_code == 404
        assert response.json()["error"] == "offer_not_found"

    def test_draft_failure_is_reported_as_warning(
        self, client: TestClient, auth_headers, factory, db, giver, seller, monkeypatch
    ):
        offer = factory.offer(giver, seller=seller)
        monkeypatch.setattr(OfferService, "_save", Mock(side_effect=StoreUnavailable()))

        response = client.post(
            f"/api/offers/{offer.id}/accept", json={"agreed_price": 40.0}, headers=auth_headers(seller)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["draft_item"] is None
        assert data["warning"] == DRAFT_ITEM_FAILED_WARNING
        db.refresh(offer)
        assert offer.status == OfferStatus.ACCEPTED

    def test_inbox_and_my_offers(self, client: TestClient, auth_headers, factory, giver, seller):
        addressed = factory.offer(giver, seller=seller)
        open_offer = factory.offer(giver)

        inbox = client.get("/api/offers/inbox", headers=auth_headers(seller))
        mine = client.get("/api/offers/my", headers=auth_headers(giver))

        assert inbox.status_code == 200
        assert {o["id"] for o in inbox.json()["offers"]} == {str(addressed.id), str(open_offer.id)}
        assert mine.status_code == 200
        assert len(mine.json()["offers"]) == 2

    def test_offer_notifies_seller(self, client: TestClient, auth_headers, giver, seller):
        client.post("/api/offers", json={**OFFER_BODY, "seller_id": str(seller.id)}, headers=auth_headers(giver))

        notifications = client.get("/api/notifications", headers=auth_headers(seller))
        count = client.get("/api/notifications/unread-count", headers=auth_headers(seller))

        assert notifications.status_code == 200
        assert [n["title"] for n in notifications.json()] == ["New Offer Received"]
        assert notifications.json()[0]["type"] == "offer"
        assert count.json() == {"unread_count": 1}

    def test_non_finite_agreed_price_is_bad_request(self, client: TestClient, auth_headers, factory, db, giver, seller):
        offer = factory.offer(giver, seller=seller)
        headers = {**auth_headers(seller), "Content-Type": "application/json"}

        for raw in ('{"agreed_price": NaN}', '{"agreed_price": Infinity}'):
            response = client.post(f"/api/offers/{offer.id}/accept", content=raw, headers=headers)

            assert response.status_code == 400
            assert response.json()["error"] == "validation_error"

        db.refresh(offer)
        assert offer.status == OfferStatus.PENDING
        assert offer.agreed_price is None

    def test_non_finite_expected_price_is_bad_request(self, client: TestClient, auth_headers, giver):
        headers = {**auth_headers(giver), "Content-Type": "application/json"}
        raw = '{"item_name": "Old bicycle", "condition": "used", "expected_price": NaN}'

        response = client.post("/api/offers", content=raw, headers=headers)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
