from dataclasses import dataclass
from enum import Enum


class DiagnosticLevel(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR   = "error"
    SKIPPED = "skipped"


@dataclass
class Diagnostic:
    level: DiagnosticLevel
    rule: str          # rule code, e.g. "resource-class"
    scope: str         # e.g. "AWS::S3::Bucket"
    message: str

    @property
    def qualified_code(self) -> str:
        return f"{self.rule}:{self.scope}"

    def to_dict(self) -> dict:
        return {
            "level": self.level.value,
            "rule": self.rule,
            "scope": self.scope,
            "message": self.message,
        }
