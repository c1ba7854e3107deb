"""Pydantic models for the Kaikki (wiktextract) JSON-lines dictionary dump."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class KaikkiBaseModel(BaseModel):
    # wiktextract emits many more keys than the enrichment pipeline reads
    model_config = ConfigDict(extra="ignore")


class KaikkiForm(KaikkiBaseModel):
    form: str
    tags: list[str] = Field(default_factory=list)

    def has_tags(self, *tags: str) -> bool:
        return all(tag in self.tags for tag in tags)


class KaikkiTranslation(KaikkiBaseModel):
    word: str | None = None
    lang: str | None = None
    code: str | None = None
    sense: str | None = None

    @property
    def is_english(self) -> bool:
        return self.lang == "English" or self.code == "en"


class KaikkiExample(KaikkiBaseModel):
    text: str | None = None
    translation: str | None = None
    english: str | None = None

    @property
    def english_text(self) -> str | None:
        return self.translation or self.english


class KaikkiLinkedWord(KaikkiBaseModel):
    word: str | None = None


class KaikkiHeadTemplate(KaikkiBaseModel):
    name: str | None = None
    args: dict[str, str] = Field(default_factory=dict)

    @field_validator("args", mode="before")
    @classmethod
    def stringify_args(cls, value: object) -> dict[str, str]:
        if not isinstance(value, dict):
            return {}
        return {str(key): str(item) for key, item in value.items() if item is not None}


class KaikkiSense(KaikkiBaseModel):
    glosses: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    qualifier: str | None = None
    translations: list[KaikkiTranslation] = Field(default_factory=list)
    examples: list[KaikkiExample] = Field(default_factory=list)
    synonyms: list[KaikkiLinkedWord] = Field(default_factory=list)


class KaikkiEntry(KaikkiBaseModel):
    word: str
    lang: str | None = None
    lang_code: str | None = None
    pos: str | None = None
    tags: list[str] = Field(default_factory=list)
    forms: list[KaikkiForm] = Field(default_factory=list)
    head_templates: list[KaikkiHeadTemplate] = Field(default_factory=list)
    senses: list[KaikkiSense] = Field(default_factory=list)
    translations: list[KaikkiTranslation] = Field(default_factory=list)
    synonyms: list[KaikkiLinkedWord] = Field(default_factory=list)

    @property
    def is_german(self) -> bool:
        return self.lang == "German" or self.lang_code == "de"
