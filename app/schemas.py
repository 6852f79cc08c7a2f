"""
AuthNotes - Pydantic schemas for note request/response validation.
"""
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime


class NoteWrite(BaseModel):
    """Body for creating or replacing a note. Both fields are required."""
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=1, max_length=1000)

    @field_validator("title", "content", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class NoteResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    # Notes keep the document-store key on the wire; users use "id"
    id: str = Field(validation_alias=AliasChoices("id", "_id"), serialization_alias="_id")
    title: str
    content: str
    user: str = Field(validation_alias=AliasChoices("user_id", "user"))
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    message: str
