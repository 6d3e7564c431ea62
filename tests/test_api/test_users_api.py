"""
API tests for /api/v1/users
"""
from app.core.roles import RoleName
from app.repositories.user_repository import UserRepository


class TestCurrentUser:

    def test_get_self_returns_roles_and_firebase_profile(self, client, make_user):
        headers = make_user("customer-9", RoleName.CUSTOMER, email="ana@example.com", name="Ana")

        response = client.get("/api/v1/users/me", headers=headers)

        assert response.status_code == 200
        assert response.json()["data"] == {
            "id": "customer-9",
            "roles": ["CUSTOMER"],
            "email": "ana@example.com",
            "name": "Ana",
        }

    def test_get_self_requires_authentication(self, client):
        assert client.get("/api/v1/users/me").status_code == 401

    def test_permissions_are_union_of_roles(self, client, make_user):
        headers = make_user("mixed-1", RoleName.SELLER, RoleName.CUSTOMER)

        response = client.get("/api/v1/users/me/permissions", headers=headers)

        permissions = response.json()["data"]
        assert permissions["can_manage_products"] is True
        assert permissions["can_view_analytics"] is True
        assert permissions["can_manage_users"] is False
        assert permissions["can_manage_roles"] is False

    def test_sync_creates_user_and_assigns_customer(self, client, auth_client, db_session):
        """Test first login creates the local profile and the CUSTOMER role"""
        # Arrange: user only known to Firebase
        token = auth_client.register("new-user", email="new@example.com", display_name="New User")

        # Act
        response = client.post("/api/v1/users/me/sync", headers={"x-firebase-token": token})

        # Assert
        assert response.status_code == 200
        assert response.json() == {"success": True, "roles": ["CUSTOMER"]}
        db_session.expire_all()
        repo = UserRepository(db_session)
        assert repo.find_by_id("new-user").email == "new@example.com"
        assert repo.get_role_names("new-user") == [RoleName.CUSTOMER]

    def test_sync_fills_profile_of_user_created_by_a_cart_write(self, client, auth_client, make_product,
                                                               super_admin_headers):
        """Test a row created on demand gets the Firebase email and name on sync"""
        # Arrange: first write happens before any sync
        token = auth_client.register("fresh-1", email="fresh@example.com", display_name="Fresh User")
        headers = {"x-firebase-token": token}
        product = make_product()
        client.post("/api/v1/cart/items", json={"product_id": product.id}, headers=headers)

        # Act
        response = client.post("/api/v1/users/me/sync", headers=headers)

        # Assert
        assert response.status_code == 200
        users = {user["id"]: user for user in client.get("/api/v1/users/", headers=super_admin_headers).json()["data"]}
        assert users["fresh-1"]["email"] == "fresh@example.com"
        assert users["fresh-1"]["name"] == "Fresh User"
        assert users["fresh-1"]["roles"] == ["CUSTOMER"]

    def test_sync_keeps_existing_roles(self, client, seller_headers):
        response = client.post("/api/v1/users/me/sync", headers=seller_headers)

        assert response.json() == {"success": True, "roles": ["SELLER"]}


class TestRoleManagement:

    def test_list_users_requires_super_admin(self, client, admin_headers):
        response = client.get("/api/v1/users/", headers=admin_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == "User does not have required role(s): SUPER_ADMIN"

    def test_list_users_with_roles(self, client, super_admin_headers, customer_headers):
        response = client.get("/api/v1/users/", headers=super_admin_headers)

        assert response.status_code == 200
        users = {user["id"]: user["roles"] for user in response.json()["data"]}
        assert users == {"root-1": ["SUPER_ADMIN"], "customer-1": ["CUSTOMER"]}

    def test_assign_role(self, client, super_admin_headers, customer_headers, db_session):
        response = client.post("/api/v1/users/roles", json={"user_id": "customer-1", "role_name": "SELLER"},
                               headers=super_admin_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        db_session.expire_all()
        assert set(UserRepository(db_session).get_role_names("customer-1")) == {RoleName.CUSTOMER, RoleName.SELLER}

    def test_assign_role_is_idempotent(self, client, super_admin_headers, customer_headers, db_session):
        payload = {"user_id": "customer-1", "role_name": "CUSTOMER"}

        response = client.post("/api/v1/users/roles", json=payload, headers=super_admin_headers)

        assert response.status_code == 200
        assert UserRepository(db_session).get_role_names("customer-1") == [RoleName.CUSTOMER]

    def test_assigned_role_grants_access(self, client, super_admin_headers, customer_headers, sample_product_data):
        client.post("/api/v1/users/roles", json={"user_id": "customer-1", "role_name": "SELLER"},
                    headers=super_admin_headers)

        response = client.post("/api/v1/products/", json=sample_product_data, headers=customer_headers)

        assert response.status_code == 201

    def test_assign_unknown_role_rejected(self, client, super_admin_headers):
        response = client.post("/api/v1/users/roles", json={"user_id": "customer-1", "role_name": "OWNER"},
                               headers=super_admin_headers)
        assert response.status_code == 422

    def test_assign_role_to_empty_user_id_rejected(self, client, super_admin_headers):
        response = client.post("/api/v1/users/roles", json={"user_id": "", "role_name": "ADMIN"},
                               headers=super_admin_headers)
        assert response.status_code == 422

    def test_revoke_role(self, client, super_admin_headers, customer_headers, db_session):
        response = client.delete("/api/v1/users/customer-1/roles/CUSTOMER", headers=super_admin_headers)

        assert response.status_code == 200
        db_session.expire_all()
        assert UserRepository(db_session).get_role_names("customer-1") == []

    def test_revoke_missing_role(self, client, super_admin_headers, customer_headers):
        response = client.delete("/api/v1/users/customer-1/roles/ADMIN", headers=super_admin_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "User does not have role ADMIN"

    def test_cannot_revoke_own_super_admin(self, client, super_admin_headers):
        response = client.delete("/api/v1/users/root-1/roles/SUPER_ADMIN", headers=super_admin_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "You cannot remove your own SUPER_ADMIN role"
