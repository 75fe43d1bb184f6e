# Overview: Business member management (add or invite, edit, remove).

"""
User modals.

AddUserModal has two modes:
- CREATE: a new account; full name, email, password (>= 8 chars) and a
  matching confirmation are required
- INVITE: an existing account joins the business; only email and role are
  required, name and password are neither validated nor sent

Password fields are re-validated on every change so the operator sees a
mismatch while typing, not only on submit.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Optional

from ..i18n import Language, TranslationTable
from ..models.users import AddUserMode, BusinessUser, UserRole
from ..validation import MIN_PASSWORD_LENGTH, is_valid_email, is_valid_phone, password_errors, split_full_name
from .api_client import AdminApiClient, ApiCall
from .form_service import ConfirmDeleteModal, FormModal, FormState


USERS_PATH = "/api/admin/users"


USER_TRANSLATIONS: TranslationTable = {
    Language.EN: {
        "title": "Users",
        "created": "User added successfully",
        "invited": "Invitation sent successfully",
        "updated": "User updated successfully",
        "deleted": "User removed successfully",
        "save_failed": "Error saving user. Please try again.",
        "delete_failed": "Failed to remove user",
        "name_required": "Full name is required",
        "email_required": "Email is required",
        "email_invalid": "Please enter a valid email address",
        "invalid_phone": "Invalid phone number",
        "role_required": "Role is required",
        "password_required": "Password is required",
        "password_too_short": "Password must be at least 8 characters",
        "passwords_do_not_match": "Passwords do not match",
    },
    Language.SW: {
        "title": "Watumiaji",
        "created": "Mtumiaji ameongezwa kikamilifu",
        "invited": "Mwaliko umetumwa kikamilifu",
        "updated": "Mtumiaji amesasishwa kikamilifu",
        "deleted": "Mtumiaji ameondolewa kikamilifu",
        "save_failed": "Hitilafu katika kuhifadhi mtumiaji. Tafadhali jaribu tena.",
        "delete_failed": "Imeshindwa kumwondoa mtumiaji",
        "name_required": "Jina kamili linahitajika",
        "email_required": "Barua pepe inahitajika",
        "email_invalid": "Tafadhali ingiza barua pepe sahihi",
        "invalid_phone": "Nambari ya simu si sahihi",
        "role_required": "Jukumu linahitajika",
        "password_required": "Nywila inahitajika",
        "password_too_short": "Nywila lazima iwe na angalau herufi 8",
        "passwords_do_not_match": "Nywila hazifanani",
    },
}

PASSWORD_FIELDS = ("password", "confirm_password")


class UserError(Exception):
    """Raised when the member list cannot be loaded."""


def _touches_password(changes: dict[str, Any]) -> bool:
    return any(name in changes for name in PASSWORD_FIELDS)


@dataclass
class UserForm(FormState):
    full_name: str = ""
    email: str = ""
    phone: str = ""
    password: str = ""
    confirm_password: str = ""
    role: UserRole = UserRole.CASHIER
    is_active: bool = True


class _UserModal(FormModal):
    translations = USER_TRANSLATIONS

    def __init__(self, api: AdminApiClient, notifications, *, business_id: int, **kwargs):
        self.business_id = business_id
        super().__init__(api, notifications, **kwargs)

    def empty_form(self) -> UserForm:
        return UserForm()

    @property
    def checks_password(self) -> bool:
        return True

    def _password_messages(self) -> dict[str, str]:
        return {key: self.t(key) for key in ("password_required", "password_too_short", "passwords_do_not_match")}

    def on_change(self, changes: dict[str, Any]) -> None:
        if not self.checks_password or not _touches_password(changes):
            return
        for name in PASSWORD_FIELDS:
            self.errors.pop(name, None)

        form = self.form
        if "password" in changes:
            if not form.password:
                self.errors["password"] = self.t("password_required")
            elif len(form.password) < MIN_PASSWORD_LENGTH:
                self.errors["password"] = self.t("password_too_short")
            if form.confirm_password and form.password != form.confirm_password:
                self.errors["confirm_password"] = self.t("passwords_do_not_match")
        else:
            if not form.confirm_password:
                self.errors["confirm_password"] = self.t("password_required")
            elif form.password != form.confirm_password:
                self.errors["confirm_password"] = self.t("passwords_do_not_match")

    def _identity_errors(self, *, name_required: bool) -> dict[str, str]:
        form = self.form
        errors = {}
        if name_required and not form.full_name.strip():
            errors["full_name"] = self.t("name_required")
        email = form.email.strip()
        if not email:
            errors["email"] = self.t("email_required")
        elif not is_valid_email(email):
            errors["email"] = self.t("email_invalid")
        if form.phone.strip() and not is_valid_phone(form.phone):
            errors["phone"] = self.t("invalid_phone")
        if not form.role:
            errors["role"] = self.t("role_required")
        return errors

    def _params(self) -> dict:
        return {"businessId": self.business_id}


class AddUserModal(_UserModal):
    success_key: ClassVar[str] = "created"

    def __init__(self, *args, mode: AddUserMode = AddUserMode.CREATE, **kwargs):
        self.mode = AddUserMode(mode)
        super().__init__(*args, **kwargs)

    def set_mode(self, mode: AddUserMode) -> None:
        self.mode = AddUserMode(mode)
        for name in ("full_name",) + PASSWORD_FIELDS:
            self.errors.pop(name, None)

    @property
    def checks_password(self) -> bool:
        return self.mode == AddUserMode.CREATE

    def validate(self) -> dict[str, str]:
        creating = self.mode == AddUserMode.CREATE
        errors = self._identity_errors(name_required=creating)
        if creating:
            errors.update(password_errors(
                self.form.password,
                self.form.confirm_password,
                self._password_messages(),
            ))
        return errors

    def build_call(self) -> ApiCall:
        form = self.form
        payload = {
            "email": form.email.strip(),
            "role": UserRole(form.role).value,
            "isActive": bool(form.is_active),
            "inviteExistingUser": self.mode == AddUserMode.INVITE,
        }
        if form.phone.strip():
            payload["phone"] = form.phone.strip()
        if self.mode == AddUserMode.CREATE:
            first_name, last_name = split_full_name(form.full_name)
            payload.update(firstName=first_name, lastName=last_name, password=form.password)
        return ApiCall("POST", USERS_PATH, json=payload, params=self._params())

    def success_message(self, response) -> str:
        return self.t("invited" if self.mode == AddUserMode.INVITE else "created")


class EditUserModal(_UserModal):
    success_key: ClassVar[str] = "updated"

    def __init__(self, *args, **kwargs):
        self.user: Optional[BusinessUser] = None
        self.change_password = False
        super().__init__(*args, **kwargs)

    def reset(self) -> None:
        super().reset()
        self.user = None
        self.change_password = False

    def populate(self, user: BusinessUser) -> None:
        self.user = user
        self.form = UserForm(
            full_name=user.full_name,
            email=user.email,
            phone=user.phone or "",
            role=user.role,
            is_active=user.is_active,
        )

    def set_change_password(self, enabled: bool) -> None:
        self.change_password = bool(enabled)
        if not self.change_password:
            self.form.password = ""
            self.form.confirm_password = ""
            for name in PASSWORD_FIELDS:
                self.errors.pop(name, None)

    @property
    def checks_password(self) -> bool:
        return self.change_password

    def validate(self) -> dict[str, str]:
        errors = self._identity_errors(name_required=True)
        if self.user is None:
            errors["user"] = self.t("nothing_selected")
        if self.change_password:
            errors.update(password_errors(
                self.form.password,
                self.form.confirm_password,
                self._password_messages(),
            ))
        return errors

    def build_call(self) -> ApiCall:
        form = self.form
        first_name, last_name = split_full_name(form.full_name)
        payload = {
            "firstName": first_name,
            "lastName": last_name,
            "email": form.email.strip(),
            "role": UserRole(form.role).value,
            "isActive": bool(form.is_active),
        }
        if form.phone.strip():
            payload["phone"] = form.phone.strip()
        if self.change_password and form.password:
            payload["password"] = form.password
        return ApiCall("PUT", f"{USERS_PATH}/{self.user.id}", json=payload, params=self._params())


class DeleteUserModal(ConfirmDeleteModal):
    translations = USER_TRANSLATIONS

    def __init__(self, api: AdminApiClient, notifications, *, business_id: int, **kwargs):
        self.business_id = business_id
        super().__init__(api, notifications, **kwargs)

    def build_call(self) -> ApiCall:
        return ApiCall("DELETE", f"{USERS_PATH}/{self.entity.id}", params={"businessId": self.business_id})


def list_users(api: AdminApiClient, business_id: int) -> list[BusinessUser]:
    response = api.get(USERS_PATH, params={"businessId": business_id})
    if not response.success:
        raise UserError(response.message or "Failed to load users")
    data = response.data
    rows = data.get("users") if isinstance(data, dict) else data
    return [BusinessUser.from_api(row) for row in rows or []]


def find_user(api: AdminApiClient, business_id: int, user_id: int) -> Optional[BusinessUser]:
    # The by-id endpoint omits the business role and status, so read the member list
    for user in list_users(api, business_id):
        if user.id == user_id:
            return user
    return None
