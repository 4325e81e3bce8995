import pytest

from restodesk.core.exceptions import UserUpdateError
from restodesk.core.security import verify_password
from restodesk.models import UserRole

from tests.helpers import DEMO_PASSWORD, SUPERADMIN, SUPERADMIN_PASSWORD


class TestLogin:

    def test_login_sets_user_and_tenant(self, system, dave_id):
        controller = system.new_controller()
        result = controller.login("jane", DEMO_PASSWORD)

        assert result.success
        assert controller.is_authenticated
        assert controller.current_user.username == "jane"
        assert controller.active_tenant_id == dave_id

    def test_username_is_case_insensitive(self, controller):
        assert controller.login("JoHn", DEMO_PASSWORD)

    def test_wrong_password_fails(self, controller):
        result = controller.login("john", "wrong")
        assert not result
        assert result.error_code == "invalid_credentials"
        assert not controller.is_authenticated

    def test_unknown_user_fails(self, controller):
        assert controller.login("nobody", DEMO_PASSWORD).error_code == "invalid_credentials"

    def test_password_is_stored_hashed(self, system):
        john = system.users.by_username("john")
        assert john.password_hash != DEMO_PASSWORD
        assert verify_password(DEMO_PASSWORD, john.password_hash)

    def test_superadmin_needs_real_password(self, controller):
        assert not controller.login(SUPERADMIN, "")
        assert not controller.login(SUPERADMIN, "anything")

        assert controller.login(SUPERADMIN, SUPERADMIN_PASSWORD)
        assert controller.is_superadmin

    def test_regular_admin_is_not_superadmin(self, controller):
        assert controller.login("dave", DEMO_PASSWORD)
        assert controller.is_admin
        assert not controller.is_superadmin


class TestSuspension:

    def test_customer_of_suspended_tenant_cannot_login(self, system, dave_id):
        system.new_controller().toggle_admin_status(dave_id)

        result = system.new_controller().login("jane", DEMO_PASSWORD)
        assert not result.success
        assert result.error_code == "tenant_suspended"

    def test_admin_of_suspended_tenant_can_login(self, system, dave_id):
        system.new_controller().toggle_admin_status(dave_id)

        controller = system.new_controller()
        assert controller.login("dave", DEMO_PASSWORD)
        assert controller.active_tenant_id == dave_id

    def test_toggle_back_restores_customer_login(self, system, madison_id):
        superadmin = system.new_controller()
        assert superadmin.login(SUPERADMIN, SUPERADMIN_PASSWORD)

        superadmin.toggle_admin_status(madison_id)
        assert not system.new_controller().login("john", DEMO_PASSWORD)

        superadmin.toggle_admin_status(madison_id)
        assert system.new_controller().login("john", DEMO_PASSWORD)

    def test_toggle_ignores_customers_and_unknown_ids(self, system):
        controller = system.new_controller()
        assert controller.toggle_admin_status("user-2") is None
        assert controller.toggle_admin_status("missing") is None
        assert system.users.by_id("user-2").is_active is None


class TestRegistration:

    def test_register_creates_customer_in_active_tenant(self, system, dave_id):
        controller = system.new_controller(dave_id)
        result = controller.register("maria", "secret", "600-000-000", UserRole.CUSTOMER)

        assert result.success
        assert controller.current_user.username == "maria"
        assert controller.current_user.restaurant_id == dave_id
        assert controller.current_user.role == UserRole.CUSTOMER
        assert system.users.by_username("MARIA") is not None

    def test_register_in_default_tenant(self, controller, madison_id):
        assert controller.register("maria", "secret", "600")
        assert controller.current_user.restaurant_id == madison_id

    def test_duplicate_username_rejected_ignoring_case(self, system):
        controller = system.new_controller()
        assert controller.register("bob", "secret", "1")

        other = system.new_controller()
        result = other.register("Bob", "secret", "2")
        assert not result
        assert result.error_code == "username_taken"

    def test_duplicate_across_tenants_rejected(self, system, dave_id):
        # john belongs to Madison's; usernames are global
        result = system.new_controller(dave_id).register("JOHN", "secret", "1")
        assert result.error_code == "username_taken"

    def test_register_refused_on_suspended_tenant(self, system, dave_id):
        system.new_controller().toggle_admin_status(dave_id)
        result = system.new_controller(dave_id).register("maria", "secret", "1")
        assert result.error_code == "tenant_suspended"

    def test_register_refused_without_tenant(self, empty_system):
        result = empty_system.new_controller().register("maria", "secret", "1")
        assert result.error_code == "no_tenant"

    def test_register_admin_joins_existing_tenant(self, system, dave_id):
        controller = system.new_controller(dave_id)
        assert controller.register("dave_staff", "secret", "1", UserRole.ADMIN)
        assert controller.is_admin
        assert controller.current_user.restaurant_id == dave_id


class TestLogout:

    def test_logout_reverts_to_link_tenant(self, system, dave_id, madison_id):
        controller = system.new_controller(dave_id)
        assert controller.login("john", DEMO_PASSWORD)
        assert controller.active_tenant_id == madison_id

        controller.logout()
        assert controller.current_user is None
        assert controller.active_tenant_id == dave_id

    def test_logout_reverts_to_default_tenant(self, controller, madison_id):
        assert controller.login("dave", DEMO_PASSWORD)
        controller.logout()
        assert not controller.is_authenticated
        assert controller.active_tenant_id == madison_id


class TestAccountManagement:

    def test_update_refreshes_session_copy(self, controller):
        assert controller.login("dave", DEMO_PASSWORD)
        user_id = controller.current_user.id

        updated = controller.update_user(user_id, {"business_name": "Dave's Diner", "contact": "999"})

        assert updated.business_name == "Dave's Diner"
        assert controller.current_user.business_name == "Dave's Diner"
        assert controller.current_user.contact == "999"

    def test_blank_password_keeps_old_one(self, system, controller):
        assert controller.login("john", DEMO_PASSWORD)
        controller.update_user("user-2", {"password": "", "contact": "1"})
        assert system.new_controller().login("john", DEMO_PASSWORD)

    def test_new_password_and_username(self, system, controller):
        assert controller.login("john", DEMO_PASSWORD)
        controller.update_user("user-2", {"username": "johnny", "password": "n3w"})

        assert not system.new_controller().login("john", DEMO_PASSWORD)
        assert system.new_controller().login("Johnny", "n3w")

    def test_username_clash_rejected(self, controller):
        with pytest.raises(UserUpdateError):
            controller.update_user("user-2", {"username": "DAVE"})

    def test_unknown_user_rejected(self, controller):
        with pytest.raises(UserUpdateError):
            controller.update_user("missing", {"contact": "1"})

    def test_role_cannot_be_edited(self, controller):
        with pytest.raises(UserUpdateError):
            controller.update_user("user-2", {"role": "admin"})


class TestRestaurantProvisioning:

    def test_create_admin_makes_new_active_tenant(self, system):
        controller = system.new_controller()
        tenant_id = controller.create_admin("Luigi's", "luigi", "pw")

        assert tenant_id is not None
        owner = system.users.by_id(tenant_id)
        assert owner.restaurant_id == tenant_id
        assert owner.is_tenant_owner
        assert owner.is_active is True
        assert owner.contact == "N/A"
        assert system.resolver.resolve(tenant_id).business_name == "Luigi's"
        assert system.new_controller().login("luigi", "pw")

    def test_create_admin_duplicate_username(self, controller):
        assert controller.create_admin("Another", "Dave", "pw") is None

    def test_create_admin_requires_all_fields(self, controller):
        assert controller.create_admin("", "luigi", "pw") is None
        assert controller.create_admin("Luigi's", "luigi", "") is None

    def test_manageable_admins_excludes_self(self, controller):
        assert controller.login(SUPERADMIN, SUPERADMIN_PASSWORD)
        usernames = [a.username for a in controller.manageable_admins()]
        assert usernames == ["admin", "dave"]
