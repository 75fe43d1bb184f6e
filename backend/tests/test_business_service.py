"""
Business onboarding, settings and logo tests.

Verifies:
- Slug derivation and manual override
- Wizard cannot advance without a plan and cannot be dismissed early
- Slug collisions surface as an inline field error
- Settings load/save round trip keeps the form open with saved values
- Logo checks run before any upload
"""

import pytest

from koppela_admin.services.business_service import (
    BUSINESS_PATH,
    CREATE_BUSINESS_PATH,
    UPLOAD_LOGO_PATH,
    BusinessSettingsForm,
    CreateBusinessWizard,
    LogoUpload,
    WizardStep,
    is_slug_collision,
    slugify,
)
from koppela_admin.services.subscription_service import PLANS_PATH


PLANS = [
    {"id": 1, "name": "free", "displayName": "Free", "priceMonthly": 0},
    {"id": 2, "name": "pro", "displayName": "Pro", "priceMonthly": 25000},
]


@pytest.fixture
def wizard(api, notifications, fake_api):
    fake_api.ok("GET", PLANS_PATH, PLANS)
    created = []
    wizard = CreateBusinessWizard(api, notifications, on_created=created.append)
    wizard.created = created
    return wizard


# =============================================================================
# SLUGS
# =============================================================================


class TestSlugify:
    @pytest.mark.parametrize(
        "name,slug",
        [
            ("Koppela Mini Mart", "koppela-mini-mart"),
            ("  Duka   la  Mama  ", "duka-la-mama"),
            ("Café & Bar!", "caf--bar"),
            ("ABC-123", "abc-123"),
            ("", ""),
        ],
    )
    def test_slugify(self, name, slug):
        assert slugify(name) == slug

    def test_truncated_to_fifty(self):
        assert len(slugify("a" * 80)) == 50

    def test_collision_detection(self):
        assert is_slug_collision("Business with this slug already exists")
        assert not is_slug_collision("Business name is required")
        assert not is_slug_collision(None)


# =============================================================================
# CREATE WIZARD
# =============================================================================


class TestCreateBusinessWizard:
    """Plan step, details step, submit."""

    def test_open_loads_plans_without_preselecting(self, wizard):
        wizard.open()
        assert [p.id for p in wizard.plans] == [1, 2]
        assert wizard.form.plan_id is None
        assert wizard.step == WizardStep.PLAN

    def test_cannot_advance_without_plan(self, wizard):
        wizard.open()
        assert wizard.next_step() is False
        assert wizard.errors["plan_id"] == "Please select a plan to continue"

        wizard.select_plan(2)
        assert wizard.next_step() is True
        assert wizard.step == WizardStep.DETAILS

    def test_slug_follows_name_until_edited(self, wizard):
        wizard.open()
        wizard.change(name="Mama Ntilie Foods")
        assert wizard.form.slug == "mama-ntilie-foods"

        wizard.change(slug="mama-foods")
        wizard.change(name="Mama Ntilie Restaurant")
        assert wizard.form.slug == "mama-foods"

    def test_invalid_slug_is_rejected_locally(self, wizard, fake_api):
        wizard.open()
        wizard.select_plan(1)
        wizard.change(name="Shop", slug="Not Valid!")
        assert wizard.submit() is False
        assert "slug" in wizard.errors
        assert fake_api.calls_to("POST", CREATE_BUSINESS_PATH) == []

    def test_backdrop_dismiss_is_ignored_until_created(self, wizard):
        wizard.open()
        assert wizard.dismiss() is False
        assert wizard.is_open

    def test_successful_creation(self, wizard, fake_api, notifications):
        fake_api.ok("POST", CREATE_BUSINESS_PATH, {"business": {"id": 42, "slug": "duka-la-mama"}})
        wizard.open()
        wizard.select_plan(2)
        wizard.next_step()
        wizard.change(name="Duka la Mama", email="mama@duka.co.tz", business_category="GROCERY")

        assert wizard.submit() is True

        payload = fake_api.calls_to("POST", CREATE_BUSINESS_PATH)[0].json
        assert payload == {
            "name": "Duka la Mama",
            "businessType": "RETAIL",
            "businessCategory": "GROCERY",
            "slug": "duka-la-mama",
            "email": "mama@duka.co.tz",
            "planId": 2,
        }
        assert wizard.created == [42]
        assert wizard.created_business_id == 42
        assert wizard.dismiss() is True
        assert notifications.toasts[-1].message == "Business created successfully"

    def test_slug_collision_marks_the_field(self, wizard, fake_api, notifications):
        fake_api.fail("POST", CREATE_BUSINESS_PATH, "Business with this slug already exists", status=409)
        wizard.open()
        wizard.select_plan(1)
        wizard.change(name="Duka la Mama")

        assert wizard.submit() is False

        assert wizard.errors == {"slug": "This slug is already taken. Please choose another."}
        assert wizard.is_open
        assert wizard.created == []
        assert notifications.toasts[-1].message == "Business with this slug already exists"

    def test_plans_failure_shows_toast(self, api, notifications, fake_api):
        fake_api.fail("GET", PLANS_PATH, "down", status=503)
        wizard = CreateBusinessWizard(api, notifications)
        wizard.open()
        assert wizard.plans == []
        assert notifications.toasts[-1].message == "Failed to load subscription plans"


# =============================================================================
# SETTINGS
# =============================================================================


class TestBusinessSettings:
    """Load the business, edit a few fields, save the whole object."""

    BUSINESS = {
        "id": 5,
        "name": "Duka la Mama",
        "businessType": "RETAIL",
        "email": "mama@duka.co.tz",
        "currency": None,
        "taxRate": "16",
        "enableCreditSales": True,
    }

    def test_load_applies_defaults(self, api, notifications, fake_api):
        fake_api.ok("GET", BUSINESS_PATH, {"business": self.BUSINESS})
        form = BusinessSettingsForm(api, notifications, business_id=5)

        assert form.load() is True

        assert form.form.name == "Duka la Mama"
        assert form.form.currency == "TZS"
        assert form.form.tax_rate == 16.0
        assert form.form.enable_credit_sales is True
        assert fake_api.calls[0].params == {"businessId": "5"}

    def test_save_keeps_values_and_stays_open(self, api, notifications, fake_api):
        fake_api.ok("GET", BUSINESS_PATH, {"business": self.BUSINESS})
        fake_api.ok("PUT", BUSINESS_PATH)
        form = BusinessSettingsForm(api, notifications, business_id=5)
        form.load()
        form.change(city="Mwanza", retail_margin="45.5")

        assert form.submit() is True

        payload = fake_api.calls_to("PUT", BUSINESS_PATH)[0].json
        assert payload["businessId"] == 5
        assert payload["city"] == "Mwanza"
        assert payload["retailMargin"] == 45.5
        assert payload["enableCreditSales"] is True
        assert form.form.city == "Mwanza"
        assert form.is_open

    def test_invalid_number(self, api, notifications, fake_api):
        fake_api.ok("GET", BUSINESS_PATH, {"business": self.BUSINESS})
        form = BusinessSettingsForm(api, notifications, business_id=5)
        form.load()
        form.change(tax_rate="abc")
        assert form.submit() is False
        assert form.errors == {"tax_rate": "Please enter a valid number"}

    def test_load_failure(self, api, notifications, fake_api):
        fake_api.fail("GET", BUSINESS_PATH, "Business not found", status=404)
        form = BusinessSettingsForm(api, notifications, business_id=5)
        assert form.load() is False
        assert notifications.toasts[-1].message == "Business not found"


# =============================================================================
# LOGO
# =============================================================================


class TestLogoUpload:
    def test_rejects_non_images(self, api, notifications):
        upload = LogoUpload(api, notifications, business_id=5)
        assert upload.check("application/pdf", 10) == "Only image files are allowed"

    def test_rejects_large_files_without_uploading(self, api, notifications, fake_api):
        upload = LogoUpload(api, notifications, business_id=5, max_bytes=4)
        assert upload.upload("logo.png", b"12345", "image/png") is False
        assert fake_api.calls == []
        assert notifications.toasts[-1].message == "File size must be less than 5MB"

    def test_uploads_multipart(self, api, notifications, fake_api):
        fake_api.ok("POST", UPLOAD_LOGO_PATH, {"logoUrl": "/uploads/logos/5.png"})
        upload = LogoUpload(api, notifications, business_id=5)

        assert upload.upload("logo.png", b"\x89PNG", "image/png") is True

        request = fake_api.calls[0].request
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert b'name="businessId"' in request.content
        assert upload.logo_url == "/uploads/logos/5.png"
