from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, model_validator


class EmailTemplateResponse(BaseModel):
    id: int
    form_type: str
    template_type: str
    subject: str
    body: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EmailTemplateUpsert(BaseModel):
    """Update by `id`, or insert/update by (form_type, template_type) when no id is given."""
    id: Optional[int] = None
    form_type: Optional[str] = Field(default=None, max_length=50)
    template_type: Optional[str] = Field(default=None, max_length=50)
    subject: str = Field(min_length=1, max_length=255)
    body: str = Field(min_length=1)

    @model_validator(mode="after")
    def require_key(self):
        if self.id is None and not (self.form_type and self.template_type):
            raise ValueError("form_type and template_type are required when id is not provided")
        return self
