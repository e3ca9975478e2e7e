"""
PR Metadata Schemas - Pydantic models for PR metadata reads and upserts
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional
from uuid import UUID

class PRMetadataFields(BaseModel):
    """Editable PR metadata fields - all optional"""
    ticket_id: Optional[str] = None  # External ticket key
    ticket_link: Optional[str] = None  # External ticket URL
    description: Optional[str] = None  # PR description
    testing_plan: Optional[str] = None  # How the change was tested

class PRMetadataUpdate(PRMetadataFields):
    """Schema for PUT /pr-metadata - only fields present in the body are written"""

class PRMetadataResponse(PRMetadataFields):
    """Schema for PR metadata in responses"""
    id: UUID
    task_id: UUID

    model_config = ConfigDict(from_attributes=True)

class PRTemplateResponse(BaseModel):
    """Rendered GitHub PR body"""
    task_id: UUID
    markdown: str
