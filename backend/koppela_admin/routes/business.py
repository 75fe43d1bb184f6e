# Overview: Business creation wizard, business settings and logo upload.

from flask import Blueprint, current_app, g, request, session

from ..decorators import require_business, with_console
from ..extensions import admin_api
from ..responses import bad_request, envelope, json_fields, modal_result
from ..services import business_service
from ..validation import ValidationError, parse_int


business_bp = Blueprint("business", __name__, url_prefix="/console/business")


@business_bp.post("")
@with_console
def create_business():
    """
    Create a business in one pass through the wizard.

    Request body:
    {
        "plan_id": int,
        "name": str,
        "business_type": "RETAIL" | "WHOLESALE" | "BOTH",
        "business_category": str (optional),
        "slug": str (optional, derived from name when omitted),
        "email", "phone", "address", "city", "website": str (optional)
    }

    Returns:
        200: {"business_id": int}
        400: Validation errors (plan, name, slug, formats)
        502: Admin API failure (slug collisions also set errors.slug)
    """
    data = json_fields(request.get_json(silent=True))
    created = {}
    wizard = business_service.CreateBusinessWizard(
        admin_api.client,
        g.console.notifications,
        language=g.language,
        on_created=lambda business_id: created.update(business_id=business_id),
    )
    wizard.open()

    try:
        plan_id = data.get("plan_id")
        if plan_id is not None:
            wizard.select_plan(parse_int(plan_id, "plan_id"))
        if not wizard.next_step():
            return envelope(False, status=400, errors=wizard.errors)
        wizard.change(**json_fields(data, exclude=("plan_id",)))
        ok = wizard.submit()
    except ValueError as e:
        return bad_request(str(e))

    if ok and created.get("business_id"):
        session["business_id"] = created["business_id"]
    return modal_result(wizard, ok, business_id=created.get("business_id"))


@business_bp.get("/settings")
@with_console
@require_business
def get_settings():
    form = business_service.BusinessSettingsForm(
        admin_api.client, g.console.notifications, business_id=g.business_id, language=g.language,
    )
    if not form.load():
        return envelope(False, status=502)
    return envelope(True, settings=form.form.to_payload())


@business_bp.put("/settings")
@with_console
@require_business
def save_settings():
    """
    Request body: the snake_case settings fields to change; all other
    settings keep their current values and the whole object is saved.
    """
    form = business_service.BusinessSettingsForm(
        admin_api.client, g.console.notifications, business_id=g.business_id, language=g.language,
    )
    if not form.load():
        return envelope(False, status=502)

    try:
        form.change(**json_fields(request.get_json(silent=True), exclude=("business_id",)))
        ok = form.submit()
    except ValidationError as e:
        return bad_request(str(e))
    return modal_result(form, ok, settings=form.form.to_payload())


@business_bp.post("/logo")
@with_console
@require_business
def upload_logo():
    """
    Multipart form with a "file" field (image/*, at most LOGO_MAX_BYTES).
    """
    file = request.files.get("file")
    if file is None:
        return bad_request("File is required", errors={"file": "File is required"})

    content = file.read()
    upload = business_service.LogoUpload(
        admin_api.client,
        g.console.notifications,
        business_id=g.business_id,
        max_bytes=current_app.config["LOGO_MAX_BYTES"],
        language=g.language,
    )
    problem = upload.check(file.mimetype, len(content))
    if problem:
        return envelope(False, status=400, errors={"file": problem}, message=problem)

    if not upload.upload(file.filename or "logo", content, file.mimetype):
        return envelope(False, status=502)
    return envelope(True, logo_url=upload.logo_url)
