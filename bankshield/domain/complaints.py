"""Customer support complaints"""

import uuid
from datetime import datetime
from typing import List, Optional

from bankshield.domain.exceptions import InvalidRequestError
from bankshield.domain.models import Complaint, ComplaintStatus


def raise_complaint(query: str, image: Optional[str], now: datetime) -> Complaint:
    """A complaint needs a description, an attached image, or both"""
    text = (query or "").strip()
    if not text and not image:
        raise InvalidRequestError("Please describe your issue or attach an image.")
    if image and not image.startswith("data:image/"):
        raise InvalidRequestError("Please attach an image file.")

    return Complaint(
        id=f"CMP-{uuid.uuid4().hex[:10].upper()}",
        created_at=now,
        query=text,
        image=image,
        status=ComplaintStatus.SUBMITTED,
    )


def find_complaint(complaints: List[Complaint], tracking_id: str) -> Optional[Complaint]:
    """Case-insensitive lookup by complaint id"""
    wanted = tracking_id.strip().lower()
    if not wanted:
        raise InvalidRequestError("Please enter a complaint ID.")
    return next((c for c in complaints if c.id.lower() == wanted), None)
