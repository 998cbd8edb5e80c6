"""Review and certificate view models plus the server-rendered pages."""

from __future__ import annotations

from policy_portal.presentation.pages import render_page
from policy_portal.presentation.views import (
    EMPLOYEE_ID_PLACEHOLDER,
    CertificateView,
    NumberedSection,
    ReviewView,
    build_certificate,
    build_review_view,
    format_local_date,
)

__all__ = [
    "EMPLOYEE_ID_PLACEHOLDER",
    "CertificateView",
    "NumberedSection",
    "ReviewView",
    "build_certificate",
    "build_review_view",
    "format_local_date",
    "render_page",
]
