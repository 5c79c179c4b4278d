from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

FILTER_FIELDS = ("industry", "role", "country", "company", "college")


class MentorFilter(BaseModel):
    model_config = ConfigDict(extra="ignore")

    industry: str | None = None
    role: str | None = None
    country: str | None = None
    company: str | None = None
    college: str | None = None

    @field_validator(*FILTER_FIELDS, mode="before")
    @classmethod
    def _blank_is_absent(cls, value: Any) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            value = str(value)
        cleaned = value.strip()
        return cleaned or None

    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in FILTER_FIELDS)

    def supplied(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in FILTER_FIELDS if getattr(self, name)}


class Profile(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str
    headline: str = ""
    company: str = ""
    location: str = ""
    industry: str = ""
    skills: list[str] = Field(default_factory=list)
    summary: str = ""
    linkedin_url: str = Field(default="#", alias="linkedinUrl")
    source: str = ""

    def dedupe_key(self) -> tuple[str, str]:
        return (self.name.lower(), self.linkedin_url)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

