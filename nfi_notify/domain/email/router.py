"""Email router - FastAPI endpoints that trigger transactional notifications"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from ...auth import require_api_token
from ...shared.validators import is_valid_email, validate_email
from .errors import NotificationError
from .registry import all_descriptors
from .schemas import NotificationKind, NotificationRequest, Recipient, WelcomeEmailRequest
from .service import DeliveryReport, NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/notifications", tags=["Notifications"], dependencies=[Depends(require_api_token)]
)


def get_notification_service(request: Request) -> NotificationService:
    """Dependency injection for NotificationService (built in the app lifespan)"""
    return request.app.state.notification_service


def _report_response(report: DeliveryReport) -> JSONResponse:
    result = report.result
    attempts = len(report.attempts)

    if result.delivered:
        return JSONResponse(
            status_code=200,
            content={"success": True, "id": result.provider_message_id, "attempts": attempts},
        )
    if result.retryable:
        return JSONResponse(
            status_code=503,
            content={
                "success": False,
                "status": "delivery_pending",
                "reason": result.reason,
                "attempts": attempts,
            },
        )
    return JSONResponse(
        status_code=400,
        content={"success": False, "reason": result.reason, "attempts": attempts},
    )


@router.get("/kinds")
async def list_kinds():
    """List notification kinds and their subject templates"""
    return [
        {
            "kind": d.kind.value,
            "subject_template": d.subject_template,
            "body_template_id": d.body_template_id,
        }
        for d in all_descriptors()
    ]


@router.post("")
async def send_notification(
    data: NotificationRequest,
    service: NotificationService = Depends(get_notification_service),
):
    """Compose and send one transactional email"""
    recipient = Recipient(address=data.to, display_name=data.display_name)
    try:
        report = await service.notify_with_report(data.kind, recipient, data.params)
    except NotificationError as e:
        logger.warning(f"⚠️ Could not compose {data.kind.value} email: {e}")
        raise HTTPException(status_code=400, detail=str(e)) from e

    return _report_response(report)


@router.post("/welcome")
async def send_welcome(
    data: WelcomeEmailRequest,
    service: NotificationService = Depends(get_notification_service),
):
    """Welcome email sent after a newsletter signup"""
    if not data.email or not data.email.strip():
        return JSONResponse(status_code=400, content={"error": "Email requis"})

    if not is_valid_email(data.email):
        return JSONResponse(status_code=400, content={"error": "Email invalide"})
    address = validate_email(data.email)

    report = await service.notify_with_report(NotificationKind.WELCOME, Recipient(address=address))
    return _report_response(report)
