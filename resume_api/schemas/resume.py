from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(item).strip() for item in value if item is not None and str(item).strip())
    return str(value).strip()


def _coerce_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        parts = [part.strip() for part in value.splitlines()]
        return [part for part in parts if part]
    if isinstance(value, (list, tuple, set)):
        items: list[str] = []
        for item in value:
            if item is None:
                continue
            text = str(item).strip()
            if text:
                items.append(text)
        return items
    text = str(value).strip()
    return [text] if text else []


Text = Annotated[str, BeforeValidator(_coerce_text)]
StrList = Annotated[list[str], BeforeValidator(_coerce_str_list)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class PersonalInfo(CamelModel):
    name: Text = ""
    email: Text = ""
    phone: Text = ""
    location: Text = ""
    linkedin: Text | None = None
    github: Text | None = None
    website: Text | None = None


class Skills(CamelModel):
    """Categorised skills; categories beyond the fixed ones are kept as extra lists."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    technical: StrList = Field(default_factory=list)
    soft: StrList = Field(default_factory=list)
    tools: StrList = Field(default_factory=list)
    languages: StrList | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_categories(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            return {"technical": _coerce_str_list(data)}
        if isinstance(data, str):
            return {"technical": [item.strip() for item in data.split(",") if item.strip()]}
        if isinstance(data, dict):
            known = {"technical", "soft", "tools", "languages"}
            return {key: (value if key in known else _coerce_str_list(value)) for key, value in data.items()}
        return data

    def categories(self) -> dict[str, list[str]]:
        out: dict[str, list[str]] = {
            "technical": self.technical,
            "soft": self.soft,
            "tools": self.tools,
        }
        if self.languages is not None:
            out["languages"] = self.languages
        for key, value in (self.model_extra or {}).items():
            out[key] = _coerce_str_list(value)
        return out

    def is_empty(self) -> bool:
        return not any(self.categories().values())


class Experience(CamelModel):
    title: Text = ""
    company: Text = ""
    duration: Text = ""
    description: StrList = Field(default_factory=list)
    technologies: StrList = Field(default_factory=list)
    achievements: StrList | None = None

    @field_validator("technologies", mode="before")
    @classmethod
    def _split_comma_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


class Project(CamelModel):
    name: Text = ""
    description: Text = ""
    technologies: StrList = Field(default_factory=list)
    achievements: StrList = Field(default_factory=list)
    url: Text | None = None
    github: Text | None = None

    @field_validator("technologies", mode="before")
    @classmethod
    def _split_comma_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


class Education(CamelModel):
    degree: Text = ""
    institution: Text = ""
    year: Text = ""
    gpa: Text | None = None
    relevant_courses: StrList | None = None


class Certification(CamelModel):
    name: Text = ""
    issuer: Text = ""
    date: Text = ""
    url: Text | None = None
    expiry_date: Text | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_plain_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"name": data}
        return data


class ResumeContent(CamelModel):
    """Canonical structured résumé. Only sections that are set are serialised."""

    personal_info: PersonalInfo | None = None
    professional_summary: Text | None = None
    skills: Skills | None = None
    experience: list[Experience] | None = None
    projects: list[Project] | None = None
    education: list[Education] | None = None
    achievements: StrList | None = None
    certifications: list[Certification] | None = None

    @property
    def name(self) -> str:
        if self.personal_info is None:
            return ""
        return self.personal_info.name

    def has_identity(self) -> bool:
        return bool(self.name.strip())

    def section_keys(self) -> list[str]:
        return list(self.to_payload().keys())

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
