"""
Data model for the smart replacement engine.

Defines Pydantic models for edit operations, parsed commands, brand style
profiles, compliance verdicts and AI suggestions. Python attributes are
snake_case; the wire format uses the camelCase aliases.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

# A content record: str | int | float | bool | None | list | dict, tree-shaped.
Entry = Any


def _require_text(value: str, label: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError(f"{label} cannot be empty")
    return value


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value if value.strip() else None


class ReplaceOperation(BaseModel):
    """Literal find/replace across the whole entry."""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {"type": "replace", "findText": "Acme", "replaceText": "Globex"}
        },
    )

    type: Literal["replace"] = "replace"
    find_text: str = Field(..., alias="findText", description="Literal text to find (never a pattern)")
    replace_text: Optional[str] = Field(
        None, alias="replaceText", description="Replacement; None until a suggestion materializes it"
    )

    @field_validator("find_text")
    @classmethod
    def _find_not_blank(cls, v: str) -> str:
        return _require_text(v, "findText")

    @field_validator("replace_text")
    @classmethod
    def _replace_blank_is_missing(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @property
    def replacement(self) -> Optional[str]:
        return self.replace_text


class FieldUpdateOperation(BaseModel):
    """Overwrite (or create) a named top-level field."""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {"type": "field_update", "fieldName": "designation", "newValue": "Manager"}
        },
    )

    type: Literal["field_update"] = "field_update"
    field_name: str = Field(..., alias="fieldName", description="Requested field name or alias")
    new_value: Optional[str] = Field(None, alias="newValue", description="New field value")

    @field_validator("field_name")
    @classmethod
    def _field_not_blank(cls, v: str) -> str:
        return _require_text(v, "fieldName")

    @field_validator("new_value")
    @classmethod
    def _value_blank_is_missing(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @property
    def replacement(self) -> Optional[str]:
        return self.new_value


Operation = Annotated[Union[ReplaceOperation, FieldUpdateOperation], Field(discriminator="type")]

operation_list_adapter = TypeAdapter(List[Operation])


def parse_operations(raw: Any) -> List[Union[ReplaceOperation, FieldUpdateOperation]]:
    """Validate a JSON list of operations into typed models."""
    return operation_list_adapter.validate_python(raw)


class ParsedCommand(BaseModel):
    """Result of parsing a free-text instruction. Invalid means nothing was extracted."""
    model_config = ConfigDict(populate_by_name=True)

    original_input: str = Field("", alias="originalInput")
    operations: List[Operation] = Field(default_factory=list)
    is_valid: bool = Field(False, alias="isValid")

    @model_validator(mode="after")
    def _derive_validity(self) -> "ParsedCommand":
        self.is_valid = len(self.operations) > 0
        return self


class BrandStyleProfile(BaseModel):
    """Numeric brand communication style, read from the brand kit."""
    model_config = ConfigDict(extra="ignore")

    formality_level: int = Field(3, ge=1, le=5)
    tone: int = Field(2, description="Tone code; 2 is neutral")
    humor_level: int = Field(1, ge=1, le=5)
    complexity_level: int = Field(3, ge=1, le=5)


class ComplianceVerdict(BaseModel):
    accepted: bool
    reason: str


class Suggestion(BaseModel):
    """AI replacement with its confidence. suggestion=None means unavailable."""

    suggestion: Optional[str] = None
    confidence: int = 0

    @classmethod
    def unavailable(cls) -> "Suggestion":
        return cls(suggestion=None, confidence=0)

    @property
    def available(self) -> bool:
        return bool(self.suggestion)


class OperationReport(BaseModel):
    """Preview of one operation: materialized replacement, confidence and verdict."""
    model_config = ConfigDict(populate_by_name=True)

    operation: Operation
    confidence: Optional[int] = None
    source: Literal["explicit", "ai", "none"] = "explicit"
    compliance: Optional[ComplianceVerdict] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class SmartReplaceResult(BaseModel):
    """Persisted entry plus how many operations took effect."""

    entry: Dict[str, Any]
    applied: int
    skipped: List[str] = Field(default_factory=list, description="Field names dropped as protected")
