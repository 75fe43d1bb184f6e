"""
User modal tests.

Verifies:
- Password errors appear while typing, not only on submit
- Invite mode needs only email and role and never sends a password
- Edit sends the password only when changing it
- Member list parsing
"""

import pytest

from koppela_admin.models.users import AddUserMode, BusinessUser, UserRole
from koppela_admin.services.user_service import (
    USERS_PATH,
    AddUserModal,
    DeleteUserModal,
    EditUserModal,
    UserError,
    list_users,
)


@pytest.fixture
def add_modal(api, notifications):
    modal = AddUserModal(api, notifications, business_id=3)
    modal.open()
    return modal


class TestIncrementalPasswordValidation:
    """The confirmation field reacts to every keystroke."""

    def test_short_password_flagged_immediately(self, add_modal):
        add_modal.change(password="short")
        assert add_modal.errors["password"] == "Password must be at least 8 characters"

    def test_mismatch_appears_and_clears(self, add_modal):
        add_modal.change(password="Password123")
        add_modal.change(confirm_password="Password12")
        assert add_modal.errors["confirm_password"] == "Passwords do not match"

        add_modal.change(confirm_password="Password123")
        assert "confirm_password" not in add_modal.errors

    def test_changing_password_rechecks_confirmation(self, add_modal):
        add_modal.change(password="Password123", confirm_password="Password123")
        add_modal.change(password="Password999")
        assert add_modal.errors["confirm_password"] == "Passwords do not match"

    def test_invite_mode_ignores_password_typing(self, api, notifications):
        modal = AddUserModal(api, notifications, business_id=3, mode=AddUserMode.INVITE)
        modal.open()
        modal.change(password="x")
        assert modal.errors == {}


class TestAddUser:
    """Create and invite submissions."""

    def test_create_requires_name_and_password(self, add_modal, fake_api):
        add_modal.change(email="juma@duka.co.tz")
        assert add_modal.submit() is False
        assert set(add_modal.errors) == {"full_name", "password", "confirm_password"}
        assert fake_api.calls == []

    def test_create_payload(self, add_modal, fake_api, notifications):
        fake_api.ok("POST", USERS_PATH, {"id": 8})
        add_modal.change(
            full_name="Juma Ali Hassan",
            email=" juma@duka.co.tz ",
            password="Password123",
            confirm_password="Password123",
            role=UserRole.MANAGER,
        )

        assert add_modal.submit() is True

        call = fake_api.calls[0]
        assert call.params == {"businessId": "3"}
        assert call.json == {
            "email": "juma@duka.co.tz",
            "role": "MANAGER",
            "isActive": True,
            "inviteExistingUser": False,
            "firstName": "Juma",
            "lastName": "Ali Hassan",
            "password": "Password123",
        }
        assert notifications.toasts[-1].message == "User added successfully"

    def test_invite_sends_no_password(self, add_modal, fake_api, notifications):
        fake_api.ok("POST", USERS_PATH, {"id": 8})
        add_modal.change(full_name="Ignored", password="leaked-password")
        add_modal.set_mode(AddUserMode.INVITE)
        add_modal.change(email="asha@duka.co.tz", role="CASHIER")

        assert add_modal.submit() is True

        payload = fake_api.calls[0].json
        assert payload["inviteExistingUser"] is True
        assert "password" not in payload
        assert "firstName" not in payload
        assert notifications.toasts[-1].message == "Invitation sent successfully"

    def test_invalid_email(self, add_modal):
        add_modal.set_mode(AddUserMode.INVITE)
        add_modal.change(email="asha-at-duka")
        add_modal.submit()
        assert add_modal.errors == {"email": "Please enter a valid email address"}


class TestEditUser:
    USER = BusinessUser(id=12, first_name="Asha", last_name="Mussa", email="asha@duka.co.tz", role=UserRole.CASHIER)

    def test_prefill_and_update_without_password(self, api, notifications, fake_api):
        fake_api.ok("PUT", f"{USERS_PATH}/12")
        modal = EditUserModal(api, notifications, business_id=3)
        modal.open(self.USER)
        assert modal.form.full_name == "Asha Mussa"

        modal.change(role=UserRole.ADMIN)
        assert modal.submit() is True

        payload = fake_api.calls[0].json
        assert payload["role"] == "ADMIN"
        assert "password" not in payload

    def test_password_only_when_changing(self, api, notifications, fake_api):
        fake_api.ok("PUT", f"{USERS_PATH}/12")
        modal = EditUserModal(api, notifications, business_id=3)
        modal.open(self.USER)
        modal.set_change_password(True)
        modal.change(password="NewPassword1")
        assert modal.submit() is False
        assert modal.errors["confirm_password"] == "Password is required"

        modal.change(confirm_password="NewPassword1")
        assert modal.submit() is True
        assert fake_api.calls[0].json["password"] == "NewPassword1"

    def test_turning_password_off_clears_it(self, api, notifications):
        modal = EditUserModal(api, notifications, business_id=3)
        modal.open(self.USER)
        modal.set_change_password(True)
        modal.change(password="abc")
        modal.set_change_password(False)
        assert modal.form.password == ""
        assert "password" not in modal.errors


class TestDeleteAndList:
    def test_delete(self, api, notifications, fake_api):
        fake_api.ok("DELETE", f"{USERS_PATH}/12")
        modal = DeleteUserModal(api, notifications, business_id=3)
        modal.open(TestEditUser.USER)
        assert modal.confirm() is True
        assert notifications.toasts[-1].message == "User removed successfully"

    def test_list_users_reads_nested_accounts(self, api, fake_api):
        fake_api.ok("GET", USERS_PATH, {"users": [
            {"role": "manager", "isOwner": True, "user": {"id": 1, "firstName": "Neema", "lastName": "J", "email": "n@x.co"}},
            {"role": "auditor", "user": {"id": 2, "firstName": "Ali", "lastName": "", "email": "a@x.co"}},
        ]})
        users = list_users(api, 3)
        assert users[0].role == UserRole.MANAGER
        assert users[0].is_owner is True
        assert users[1].role == UserRole.CASHIER
        assert users[1].full_name == "Ali"

    def test_list_failure_raises(self, api, fake_api):
        fake_api.fail("GET", USERS_PATH, "Forbidden", status=403)
        with pytest.raises(UserError):
            list_users(api, 3)
