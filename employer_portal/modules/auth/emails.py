"""Rendering of the magic-link emails."""

from __future__ import annotations

from jinja2 import Environment, PackageLoader, select_autoescape

from employer_portal.infrastructure.mail import OutgoingEmail

from .models import REQUEST_LOGIN

template_environment = Environment(
    loader=PackageLoader("employer_portal", "templates/email"),
    autoescape=select_autoescape(["html"]),
)


def render_magic_link_email(*, to: str, request_type: str, url: str, ttl_hours: int, public_url: str) -> OutgoingEmail:
    """Login mail for active users, verification mail for everyone else."""
    if request_type == REQUEST_LOGIN:
        template, subject, title = "login", "Inloggen bij Colourful jobs", "Inloggen bij Colourful jobs"
    else:
        template, subject, title = "verification", "Verifieer je email voor Colourful jobs", "Verifieer je email"

    context = {
        "title": title,
        "url": url,
        "ttl_hours": ttl_hours,
        "logo_url": f"{public_url.rstrip('/')}/email/colourful-jobs_logo.png",
    }
    return OutgoingEmail(
        to=to,
        subject=subject,
        text=template_environment.get_template(f"{template}.txt").render(**context),
        html=template_environment.get_template(f"{template}.html").render(**context),
    )
