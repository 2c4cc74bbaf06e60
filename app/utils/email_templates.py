from typing import Dict, Optional

from jinja2.sandbox import SandboxedEnvironment

from app.constants.constants import FormType, TemplateType

# Admin-edited templates render in a sandbox.
# Bodies are HTML and autoescape values; subjects are plain header text.
_body_env = SandboxedEnvironment(autoescape=True)
_subject_env = SandboxedEnvironment(autoescape=False)

# Seeded into email_templates the first time the admin panel lists them
DEFAULT_EMAIL_TEMPLATES = [
    {
        "form_type": FormType.contact.value,
        "template_type": TemplateType.admin.value,
        "subject": "New Contact Form Submission",
        "body": (
            "<h2>New Contact Form Submission</h2>"
            "<p><strong>Name:</strong> {{name}}</p>"
            "<p><strong>Email:</strong> {{email}}</p>"
            "<p><strong>Phone:</strong> {{phone}}</p>"
            "<p><strong>Message:</strong> {{message}}</p>"
        ),
    },
    {
        "form_type": FormType.contact.value,
        "template_type": TemplateType.customer.value,
        "subject": "Thank You for Contacting Laxmi Electronics",
        "body": (
            "<h2>Thank You!</h2><p>Dear {{name}},</p>"
            "<p>We have received your message and will get back to you soon.</p>"
            "<p>Best regards,<br>Laxmi Electronics Team</p>"
        ),
    },
    {
        "form_type": FormType.quote.value,
        "template_type": TemplateType.admin.value,
        "subject": "New Quote Request",
        "body": (
            "<h2>New Quote Request</h2>"
            "<p><strong>Name:</strong> {{name}}</p>"
            "<p><strong>Email:</strong> {{email}}</p>"
            "<p><strong>Phone:</strong> {{phone}}</p>"
            "<p><strong>Requirement:</strong> {{requirement}}</p>"
        ),
    },
    {
        "form_type": FormType.quote.value,
        "template_type": TemplateType.customer.value,
        "subject": "Quote Request Received",
        "body": (
            "<h2>Thank You for Your Quote Request</h2><p>Dear {{name}},</p>"
            "<p>We have received your quote request and will review it shortly.</p>"
            "<p>Best regards,<br>Laxmi Electronics Team</p>"
        ),
    },
    {
        "form_type": FormType.certification.value,
        "template_type": TemplateType.admin.value,
        "subject": "New Certification Request",
        "body": (
            "<h2>New Certification Request</h2>"
            "<p><strong>Name:</strong> {{name}}</p>"
            "<p><strong>Email:</strong> {{email}}</p>"
            "<p><strong>Certification Type:</strong> {{certificationType}}</p>"
        ),
    },
    {
        "form_type": FormType.certification.value,
        "template_type": TemplateType.customer.value,
        "subject": "Certification Request Received",
        "body": (
            "<h2>Thank You for Your Certification Request</h2><p>Dear {{name}},</p>"
            "<p>We have received your certification request.</p>"
            "<p>Best regards,<br>Laxmi Electronics Team</p>"
        ),
    },
]


def single_line(value) -> str:
    """Collapse line breaks and runs of whitespace, as required for header values."""
    return " ".join(str(value or "").split())


def render_template_body(template: str, values: Dict[str, Optional[str]]) -> str:
    """Render an HTML template body. Unknown names render empty."""
    return _body_env.from_string(template).render(**values)


def render_template_subject(template: str, values: Dict[str, Optional[str]]) -> str:
    """Render a subject line. Values and the result are kept on one line."""
    flat_values = {key: single_line(value) for key, value in values.items()}
    return single_line(_subject_env.from_string(template).render(**flat_values))
