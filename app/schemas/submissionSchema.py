from typing import Annotated, ClassVar, Dict, Optional, Tuple
from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr, Field, model_validator

from app.constants.constants import FormType


def _blank_to_none(value):
    """Treat empty strings and non-scalar leftovers (e.g. serialized file objects) as absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return None


OptionalText = Annotated[Optional[str], BeforeValidator(_blank_to_none)]


class OutboundEmail(BaseModel):
    """Customer-facing message composed by the site and sent as-is."""
    to: EmailStr
    subject: str = Field(min_length=1)
    html: str = Field(min_length=1)


class AdminEmailRequest(BaseModel):
    """Operator message as supplied by the client. `to` is always replaced server-side."""
    model_config = ConfigDict(extra="ignore")

    to: OptionalText = None
    subject: OptionalText = None
    html: OptionalText = None


class SubmissionFormData(BaseModel):
    """Fields shared by every lead-capture form.

    Alternate field names sent by the different pages are folded into one
    canonical name before validation; the first non-blank alternative wins.
    """
    model_config = ConfigDict(extra="ignore")

    alternates: ClassVar[Dict[str, Tuple[str, ...]]] = {
        "phone": ("phone", "mobile_number"),
    }

    name: OptionalText = None
    first_name: OptionalText = None
    last_name: OptionalText = None
    email: OptionalText = None
    phone: OptionalText = None
    message: OptionalText = None
    requirement: OptionalText = None

    @model_validator(mode="before")
    @classmethod
    def _fold_alternates(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for canonical, names in cls.alternates.items():
            for field_name in names:
                if _blank_to_none(data.get(field_name)) is not None:
                    data[canonical] = data[field_name]
                    break
        return data

    def resolved_name(self) -> Optional[str]:
        if self.name:
            return self.name
        joined = " ".join(part for part in (self.first_name, self.last_name) if part).strip()
        return joined or None

    def resolved_message(self) -> Optional[str]:
        return self.message or self.requirement

    def extra_fields(self) -> dict:
        """Variant-specific columns of the canonical record."""
        return {}


class ContactFormData(SubmissionFormData):
    """Contact Us page: split name, postal address, project details, optional files."""
    alternates: ClassVar[Dict[str, Tuple[str, ...]]] = {
        "phone": ("phone", "mobile_number"),
        "organisation_name": ("organisation_name", "organisationName"),
    }

    organisation_name: OptionalText = None
    street_address: OptionalText = None
    city: OptionalText = None
    state: OptionalText = None
    estimated_volume: OptionalText = None
    order_release_date: OptionalText = None

    def extra_fields(self) -> dict:
        return {
            "organisation_name": self.organisation_name,
            "street_address": self.street_address,
            "city": self.city,
            "state": self.state,
            "estimated_volume": self.estimated_volume,
            "order_release_date": self.order_release_date,
        }


class QuoteFormData(SubmissionFormData):
    """Home page quote request."""
    alternates: ClassVar[Dict[str, Tuple[str, ...]]] = {
        "phone": ("phone", "mobile_number"),
        "organisation_name": ("organisation_name", "organisationName"),
    }

    organisation_name: OptionalText = None
    estimated_volume: OptionalText = None

    def extra_fields(self) -> dict:
        return {
            "organisation_name": self.organisation_name,
            "estimated_volume": self.estimated_volume,
        }


class CertificationFormData(SubmissionFormData):
    """Quality page certificate download request."""
    alternates: ClassVar[Dict[str, Tuple[str, ...]]] = {
        "phone": ("phone", "mobile_number"),
        "organisation_name": ("organisation_name", "organisationName"),
        "certification_type": ("certification_type", "selectedCert"),
    }

    organisation_name: OptionalText = None
    certification_type: OptionalText = None

    def extra_fields(self) -> dict:
        return {
            "organisation_name": self.organisation_name,
            "certification_type": self.certification_type,
        }


class GenericFormData(ContactFormData):
    """Any other form kind: keep every column we know about."""
    alternates: ClassVar[Dict[str, Tuple[str, ...]]] = {
        "phone": ("phone", "mobile_number"),
        "organisation_name": ("organisation_name", "organisationName"),
        "certification_type": ("certification_type", "selectedCert"),
    }

    certification_type: OptionalText = None

    def extra_fields(self) -> dict:
        fields = super().extra_fields()
        fields["certification_type"] = self.certification_type
        return fields


FORM_DATA_VARIANTS = {
    FormType.contact.value: ContactFormData,
    FormType.quote.value: QuoteFormData,
    FormType.certification.value: CertificationFormData,
}


class SubmissionRecord(BaseModel):
    """Canonical submission, ready to be written to form_submissions."""
    form_type: str
    name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    message: Optional[str] = None
    organisation_name: Optional[str] = None
    street_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    requirement: Optional[str] = None
    estimated_volume: Optional[str] = None
    order_release_date: Optional[str] = None
    cad_file: Optional[str] = None
    rfq_file: Optional[str] = None
    certification_type: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    email_is_placeholder: bool = False

    def column_values(self) -> dict:
        return self.model_dump(exclude={"email_is_placeholder"})

    def template_vars(self) -> dict:
        """Values for {{placeholder}} substitution in stored email templates."""
        values = {key: value or "" for key, value in self.column_values().items()}
        values["certificationType"] = values["certification_type"]
        return values
