# Overview: Shared lifecycle of every create/edit/delete modal in the console.

"""
Form modal contract.

LIFECYCLE:
1. open(entity=None): empty form (create) or populated from an entity (edit)
2. change(**fields): typed patch of the form state; clears those fields' errors
3. submit(): validate -> single HTTP request -> result handling
4. close(): reset form state

RESULT HANDLING:
- {"success": true}: on_success(data) once, success toast, reset, close
- {"success": false} or transport error: error toast (server message when
  present), modal stays open with input intact

CONCURRENCY: at most one submission in flight per modal instance. A submit
while is_submitting is True returns False without touching the network.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Callable, ClassVar, Optional

from ..i18n import COMMON, Language, TranslationTable, translate
from ..validation import ValidationError
from .api_client import AdminApiClient, ApiCall, ApiResponse, ApiTransportError
from .notification_service import NotificationService


logger = logging.getLogger(__name__)


SuccessCallback = Callable[[Any], None]


@dataclass
class FormState:
    """Base for typed form state; updates go through patch() only."""

    def patch(self, **changes: Any) -> None:
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValidationError(f"Unknown form field(s): {', '.join(unknown)}")
        for name, value in changes.items():
            setattr(self, name, value)


class FormModal:
    translations: ClassVar[TranslationTable] = COMMON
    title_key: ClassVar[str] = "title"
    success_key: ClassVar[str] = "saved"
    failure_key: ClassVar[str] = "save_failed"
    close_on_success: ClassVar[bool] = True

    def __init__(
        self,
        api: AdminApiClient,
        notifications: NotificationService,
        *,
        language: Language = Language.EN,
        on_success: Optional[SuccessCallback] = None,
    ):
        self.api = api
        self.notifications = notifications
        self.language = language
        self.on_success = on_success
        self.is_open = False
        self.is_submitting = False
        self.errors: dict[str, str] = {}
        self.upstream_failed = False
        self.failure_message: Optional[str] = None
        self.form = self.empty_form()

    # ------------------------------------------------------------------
    # Hooks for concrete modals
    # ------------------------------------------------------------------

    def empty_form(self) -> FormState:
        raise NotImplementedError

    def populate(self, entity: Any) -> None:
        """Fill the form from an existing entity (edit flows)."""

    def validate(self) -> dict[str, str]:
        return {}

    def build_call(self) -> ApiCall:
        raise NotImplementedError

    def on_change(self, changes: dict[str, Any]) -> None:
        """Incremental validation after a field changes."""

    def after_success(self, data: Any) -> None:
        """Modal-specific follow-up once the request succeeded (before on_success)."""

    def on_failure(self, response: ApiResponse) -> None:
        """Map an application error onto field errors, if it names one."""

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def t(self, key: str) -> str:
        return translate(self.translations, self.language, key)

    def open(self, entity: Any = None) -> None:
        self.reset()
        if entity is not None:
            self.populate(entity)
        self.is_open = True

    def reset(self) -> None:
        self.form = self.empty_form()
        self.errors = {}

    def close(self) -> None:
        self.is_open = False
        self.is_submitting = False
        self.reset()

    def change(self, **changes: Any) -> None:
        self.form.patch(**changes)
        for name in changes:
            self.errors.pop(name, None)
        self.on_change(changes)

    def success_message(self, response: ApiResponse) -> str:
        return self.t(self.success_key)

    def submit(self) -> bool:
        if self.is_submitting:
            logger.debug("%s submit ignored: request already in flight", type(self).__name__)
            return False

        self.upstream_failed = False
        self.failure_message = None
        self.errors = self.validate()
        if self.errors:
            logger.info("%s blocked by validation: %s", type(self).__name__, sorted(self.errors))
            return False

        call = self.build_call()
        self.is_submitting = True
        try:
            response = self.api.send(call)
        except ApiTransportError:
            logger.exception("%s request failed", type(self).__name__)
            self._report_failure(self.t(self.failure_key))
            return False
        finally:
            self.is_submitting = False

        if not response.success:
            self.on_failure(response)
            self._report_failure(response.message or self.t(self.failure_key))
            return False

        self.after_success(response.data)
        if self.on_success is not None:
            self.on_success(response.data)
        self.notifications.show_success(self.t(self.title_key), self.success_message(response))
        if self.close_on_success:
            self.close()
        return True

    def _report_failure(self, message: str) -> None:
        self.upstream_failed = True
        self.failure_message = message
        self.notifications.show_error(self.t(self.title_key), message)


class ConfirmDeleteModal(FormModal):
    """
    Destructive operations require an explicit confirmation step.

    open(entity) shows the confirmation; only confirm() sends the DELETE.
    """

    success_key: ClassVar[str] = "deleted"
    failure_key: ClassVar[str] = "delete_failed"

    def empty_form(self) -> FormState:
        return FormState()

    def __init__(self, *args, **kwargs):
        self.entity: Any = None
        super().__init__(*args, **kwargs)

    def populate(self, entity: Any) -> None:
        self.entity = entity

    def reset(self) -> None:
        super().reset()
        self.entity = None

    def validate(self) -> dict[str, str]:
        if not self.is_open or self.entity is None:
            return {"entity": self.t("nothing_selected")}
        return {}

    def confirm(self) -> bool:
        return self.submit()
