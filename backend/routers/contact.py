import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from schemas.auth import ContactSalesInput, ContactSalesResponse
from services.errors import ValidationError
from services.repositories import ContactRequestRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["contact"])


@router.post("/contact-sales", response_model=ContactSalesResponse)
async def contact_sales(input: ContactSalesInput, db: Session = Depends(get_db)):
    """Record an enterprise sales enquiry"""
    fields = (input.name, input.email, input.company, input.phone, input.message)
    if not all(f and f.strip() for f in fields):
        raise ValidationError("All fields are required")
    if "@" not in input.email:
        raise ValidationError("Invalid email address")

    entry = ContactRequestRepository(db).create(
        name=input.name.strip(),
        email=input.email.strip().lower(),
        company=input.company.strip(),
        phone=input.phone.strip(),
        message=input.message.strip(),
        plan_name=input.planName or "ENTERPRISE",
    )
    logger.info("Contact sales request %s from %s at %s (plan %s)",
                entry.id, entry.email, entry.company, entry.plan_name)

    return ContactSalesResponse(
        success=True,
        message="Thank you for your interest! Our sales team will contact you within 24 hours."
    )
