"""Rendering of the team invitation email."""

from __future__ import annotations

from employer_portal.infrastructure.mail import OutgoingEmail
from employer_portal.modules.auth.emails import template_environment


def render_invitation_email(
    *, to: str, inviter_name: str, company_name: str, url: str, ttl_hours: int, public_url: str
) -> OutgoingEmail:
    context = {
        "title": "Je bent uitgenodigd!",
        "inviter_name": inviter_name,
        "company_name": company_name,
        "url": url,
        "ttl_hours": ttl_hours,
        "logo_url": f"{public_url.rstrip('/')}/email/colourful-jobs_logo.png",
    }
    return OutgoingEmail(
        to=to,
        subject=f"Je bent uitgenodigd voor {company_name} op Colourful jobs",
        text=template_environment.get_template("invitation.txt").render(**context),
        html=template_environment.get_template("invitation.html").render(**context),
    )
