from tests.helpers import DEMO_PASSWORD, SUPERADMIN, SUPERADMIN_PASSWORD, auth, login_token

MADISON = "user-madison-admin"
DAVE = "user-dave-admin"


def test_health(api):
    response = api.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "operational"
    assert body["restaurants"] == 2


def test_tenant_from_link(api):
    assert api.get("/api/tenant").json()["tenant_id"] == MADISON

    body = api.get("/api/tenant", params={"restaurant": DAVE}).json()
    assert body["business_name"] == "Dave's Burger Shack"
    assert body["is_active"] is True

    unknown = api.get("/api/tenant", params={"restaurant": "nope"}).json()
    assert unknown["is_suspended"] is True
    assert unknown["business_name"] == "Welcome"


class TestAuth:

    def test_login_returns_token_and_tenant(self, api):
        response = api.post("/api/auth/login", json={"username": "jane", "password": DEMO_PASSWORD})
        assert response.status_code == 200
        body = response.json()
        assert body["user"]["username"] == "jane"
        assert "password_hash" not in body["user"]
        assert body["tenant"]["tenant_id"] == DAVE

        me = api.get("/api/auth/me", headers=auth(body["token"]))
        assert me.json()["user"]["id"] == "user-3"

    def test_bad_credentials(self, api):
        response = api.post("/api/auth/login", json={"username": "jane", "password": "nope"})
        assert response.status_code == 401

    def test_logout_invalidates_token(self, api):
        token = login_token(api, "john")
        assert api.post("/api/auth/logout", headers=auth(token)).status_code == 200
        assert api.get("/api/auth/me", headers=auth(token)).status_code == 401

    def test_register_into_linked_restaurant(self, api):
        response = api.post("/api/auth/register", json={
            "username": "maria", "password": "pw", "contact": "600", "restaurant": DAVE,
        })
        assert response.status_code == 200
        assert response.json()["user"]["restaurant_id"] == DAVE
        assert response.json()["user"]["role"] == "customer"

    def test_registration_cannot_request_admin_role(self, api):
        response = api.post("/api/auth/register", json={
            "username": "mallory", "password": "pw", "contact": "1", "role": "admin", "restaurant": DAVE,
        })
        assert response.status_code == 422
        assert api.post("/api/auth/login", json={"username": "mallory", "password": "pw"}).status_code == 401

        token = api.post("/api/auth/register", json={
            "username": "mallory", "password": "pw", "contact": "1", "restaurant": DAVE,
        }).json()["token"]
        assert api.get("/api/auth/me", headers=auth(token)).json()["user"]["role"] == "customer"
        assert api.get("/api/admin/sales", headers=auth(token)).status_code == 403
        assert api.get("/api/admin/customers", headers=auth(token)).status_code == 403
        assert api.delete("/api/admin/menu/9", headers=auth(token)).status_code == 403

    def test_duplicate_registration(self, api):
        response = api.post("/api/auth/register", json={"username": "John", "password": "pw", "contact": "1"})
        assert response.status_code == 400

    def test_customer_cannot_set_business_name(self, api):
        token = login_token(api, "john")
        response = api.patch("/api/account", json={"business_name": "Mine"}, headers=auth(token))
        assert response.status_code == 403

        response = api.patch("/api/account", json={"contact": "000"}, headers=auth(token))
        assert response.json()["contact"] == "000"

    def test_only_owner_sets_business_name(self, api):
        staff = login_token(api, "admin")
        response = api.patch("/api/account", json={"business_name": "Staff Pizza"}, headers=auth(staff))
        assert response.status_code == 403

        owner = login_token(api, "dave")
        response = api.patch("/api/account", json={"business_name": "Dave's Diner"}, headers=auth(owner))
        assert response.status_code == 200
        assert api.get("/api/tenant", params={"restaurant": DAVE}).json()["business_name"] == "Dave's Diner"


class TestMenu:

    def test_anonymous_menu_by_link(self, api):
        response = api.get("/api/menu", params={"restaurant": DAVE})
        assert response.status_code == 200
        body = response.json()
        assert [i["name"] for i in body["specials"]] == ["Loaded Fries"]
        assert [g["category"] for g in body["categories"]] == ["main", "beverage"]

    def test_unknown_restaurant(self, api):
        assert api.get("/api/menu", params={"restaurant": "nope"}).status_code == 404

    def test_suspended_restaurant_menu_hidden(self, api):
        token = login_token(api, SUPERADMIN, SUPERADMIN_PASSWORD)
        assert api.post(f"/api/admin/tenants/{DAVE}/toggle", headers=auth(token)).status_code == 200

        assert api.get("/api/menu", params={"restaurant": DAVE}).status_code == 403
        # the owner still manages a suspended restaurant
        dave = login_token(api, "dave")
        assert api.get("/api/menu", headers=auth(dave)).status_code == 200


class TestCartAndOrders:

    def test_customer_checkout_flow(self, api):
        token = login_token(api, "john")
        headers = auth(token)

        assert api.get("/api/cart").status_code == 401

        api.post("/api/cart/items", json={"menu_item_id": "2"}, headers=headers)
        api.post("/api/cart/items", json={"menu_item_id": "2"}, headers=headers)
        api.post("/api/cart/items", json={"menu_item_id": "4"}, headers=headers)
        api.delete("/api/cart/items/4", headers=headers)
        cart = api.put("/api/cart/items/2/notes", json={"notes": "extra cheese"}, headers=headers).json()
        assert cart["total"] == 30.0
        assert cart["lines"] == [{"menu_item_id": "2", "quantity": 2, "price": 15.0, "notes": "extra cheese"}]

        order = api.post("/api/orders", json={"payment_method": "card"}, headers=headers)
        assert order.status_code == 200
        body = order.json()
        assert body["user_id"] == "user-2"
        assert body["total"] == 30.0
        assert body["payment_method"] == "card"
        assert body["items"][0]["name"] == "Lasagna alla Bolognese"

        assert api.get("/api/cart", headers=headers).json()["lines"] == []

        history = api.get("/api/orders", headers=headers).json()
        assert history["total"] == 6
        assert history["orders"][0]["id"] == body["id"]

    def test_item_from_other_restaurant_cannot_be_added(self, api):
        token = login_token(api, "john")
        response = api.post("/api/cart/items", json={"menu_item_id": "9"}, headers=auth(token))
        assert response.status_code == 404
        assert response.json()["error"] == "menu_item_not_found"

    def test_note_for_missing_line(self, api):
        token = login_token(api, "john")
        response = api.put("/api/cart/items/2/notes", json={"notes": "x"}, headers=auth(token))
        assert response.status_code == 404

    def test_empty_cart_rejected(self, api):
        token = login_token(api, "john")
        response = api.post("/api/orders", json={}, headers=auth(token))
        assert response.status_code == 400
        assert response.json()["error"] == "order_rejected"

    def test_admin_walk_in_order(self, api):
        headers = auth(login_token(api, "dave"))
        api.post("/api/cart/items", json={"menu_item_id": "9"}, headers=headers)

        body = api.post("/api/orders", json={"payment_method": "card"}, headers=headers).json()
        assert body["user_id"] == "walk-in"
        assert body["customer_name"] == "Walk-in"
        assert body["payment_method"] == "cash"

    def test_admin_order_for_foreign_customer_rejected(self, api):
        headers = auth(login_token(api, "dave"))
        api.post("/api/cart/items", json={"menu_item_id": "9"}, headers=headers)

        response = api.post("/api/orders", json={"customer_id": "user-2"}, headers=headers)
        assert response.status_code == 400


class TestAdmin:

    def test_customer_is_forbidden(self, api):
        token = login_token(api, "john")
        assert api.get("/api/admin/sales", headers=auth(token)).status_code == 403

    def test_staff_admin_sees_only_own_restaurant(self, api):
        headers = auth(login_token(api, "admin"))

        sales = api.get("/api/admin/sales", headers=headers).json()
        assert len(sales["weekly"]) == 7
        assert [o["id"] for o in sales["orders"]] == ["order-1", "order-2", "order-3", "order-4", "order-5"]
        assert sales["top_spenders"][0] == {
            "user_id": "user-2", "username": "john", "total_spent": 110.5, "order_count": 5,
        }

        menu = api.get("/api/admin/menu", headers=headers).json()
        assert len(menu) == 8
        assert {i["restaurant_id"] for i in menu} == {MADISON}

        customers = api.get("/api/admin/customers", headers=headers).json()
        assert [c["username"] for c in customers] == ["john"]

    def test_menu_editing(self, api):
        headers = auth(login_token(api, "dave"))

        created = api.post("/api/admin/menu", json={
            "name": "Veggie Burger", "price": 10.5, "category": "main",
        }, headers=headers).json()
        assert created["restaurant_id"] == DAVE

        special = api.post(f"/api/admin/menu/{created['id']}/special", headers=headers).json()
        assert special["is_special"] is True

        assert api.delete(f"/api/admin/menu/{created['id']}", headers=headers).status_code == 200
        assert api.delete(f"/api/admin/menu/{created['id']}", headers=headers).status_code == 404

    def test_negative_price_rejected(self, api):
        headers = auth(login_token(api, "dave"))
        response = api.post("/api/admin/menu", json={"name": "Free money", "price": -1}, headers=headers)
        assert response.status_code == 422

    def test_share_link(self, api):
        body = api.get("/api/admin/share-link", headers=auth(login_token(api, "dave"))).json()
        assert body["link"].endswith(f"/#restaurant={DAVE}")


class TestSuperadmin:

    def test_regular_admin_cannot_manage_tenants(self, api):
        token = login_token(api, "dave")
        assert api.get("/api/admin/tenants", headers=auth(token)).status_code == 403

    def test_create_and_suspend_restaurant(self, api):
        headers = auth(login_token(api, SUPERADMIN, SUPERADMIN_PASSWORD))

        created = api.post("/api/admin/tenants", json={
            "business_name": "La Trattoria", "username": "luigi", "password": "pw",
        }, headers=headers)
        assert created.status_code == 200
        tenant_id = created.json()["tenant_id"]

        admins = api.get("/api/admin/tenants", headers=headers).json()
        assert [a["username"] for a in admins] == ["admin", "dave", "luigi"]

        duplicate = api.post("/api/admin/tenants", json={
            "business_name": "Again", "username": "LUIGI", "password": "pw",
        }, headers=headers)
        assert duplicate.status_code == 400

        toggled = api.post(f"/api/admin/tenants/{tenant_id}/toggle", headers=headers).json()
        assert toggled["is_active"] is False
        assert api.get("/api/tenant", params={"restaurant": tenant_id}).json()["is_suspended"] is True

        assert api.post("/api/admin/tenants/nope/toggle", headers=headers).status_code == 404

    def test_customer_of_suspended_restaurant_cannot_login(self, api):
        headers = auth(login_token(api, SUPERADMIN, SUPERADMIN_PASSWORD))
        api.post(f"/api/admin/tenants/{DAVE}/toggle", headers=headers)

        response = api.post("/api/auth/login", json={"username": "jane", "password": DEMO_PASSWORD})
        assert response.status_code == 401
