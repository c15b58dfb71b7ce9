from typing import Optional

from pydantic import Field, ValidationInfo, field_validator

from .base import MESSAGES, LintBaseModel, MessageKind, RuleName


class Fix(LintBaseModel):
    start_byte: int = Field(..., ge=0, description="Start of the replaced span")
    end_byte: int = Field(..., ge=0, description="End of the replaced span")
    text: str = Field(..., description="Replacement source text")

    @field_validator("end_byte")
    @classmethod
    def validate_span(cls, v: int, info: ValidationInfo) -> int:
        start = info.data.get("start_byte")
        if start is not None and v < start:
            raise ValueError("end_byte must not precede start_byte")
        return v


class Diagnostic(LintBaseModel):
    rule: RuleName = Field(..., description="Rule that produced the diagnostic")
    message_id: MessageKind = Field(..., description="Message identifier")
    line: int = Field(..., ge=1, description="1-based start line")
    column: int = Field(..., ge=0, description="0-based start column")
    end_line: int = Field(..., ge=1, description="1-based end line")
    end_column: int = Field(..., ge=0, description="0-based end column")
    start_byte: int = Field(..., ge=0)
    end_byte: int = Field(..., ge=0)
    fix: Optional[Fix] = Field(default=None, description="Automatic fix, if safe")
    file_path: Optional[str] = Field(default=None)

    @property
    def message(self) -> str:
        return MESSAGES[self.message_id]

    @property
    def fixable(self) -> bool:
        return self.fix is not None

    def format(self) -> str:
        location = f"{self.line}:{self.column + 1}"
        if self.file_path:
            location = f"{self.file_path}:{location}"
        return f"{location}  {self.message}  {self.rule.value}"
