"""Caller identity model.

An identity is an opaque principal string supplied by the host. Identities
compare equal when their canonical (whitespace-stripped) text is equal.
"""

from typing import Any, Union

from pydantic import BaseModel, Field, field_validator

# Principal presented by callers that carry no identity of their own
ANONYMOUS_IDENTITY = "2vxsx-fae"


class Identity(BaseModel):
    """Opaque principal identifier."""

    text: str = Field(..., min_length=1, description="Canonical principal text")

    @field_validator("text", mode="before")
    @classmethod
    def _canonicalize(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @classmethod
    def of(cls, value: Union[str, "Identity"]) -> "Identity":
        """Build an identity from raw text, passing existing identities through.

        Raises:
            ValueError: If the text is empty after canonicalization
        """
        if isinstance(value, Identity):
            return value
        return cls(text=value)

    def __str__(self) -> str:
        return self.text

    class Config:
        frozen = True
        json_schema_extra = {"example": {"text": "rrkah-fqaaa-aaaaa-aaaaq-cai"}}
