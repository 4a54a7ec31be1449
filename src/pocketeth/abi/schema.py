from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema

from ..errors import InvalidAbiDocumentError

ABI_RECORD_SCHEMA = "abi.record.schema.json"


@dataclass(frozen=True)
class AbiSchema:
    schema_root: Path

    @classmethod
    def default(cls) -> "AbiSchema":
        return cls(schema_root=Path(__file__).resolve().parent / "schemas")

    def load_schema(self, schema_filename: str = ABI_RECORD_SCHEMA) -> dict[str, Any]:
        path = self.schema_root / schema_filename
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)

    def validator_for(self, schema_filename: str = ABI_RECORD_SCHEMA) -> jsonschema.Validator:
        schema = self.load_schema(schema_filename)
        validator_cls = jsonschema.validators.validator_for(schema)
        validator_cls.check_schema(schema)
        return validator_cls(schema)

    def validate_record(self, record: Any, index: int) -> None:
        validator = _record_validator(self.schema_root)
        errors = sorted(validator.iter_errors(record), key=lambda e: list(e.path))
        if errors:
            formatted = [self._format_error(err, index) for err in errors]
            raise InvalidAbiDocumentError(
                f"ABI record {index} is invalid: {formatted[0]}",
                errors=formatted,
            )

    @staticmethod
    def _format_error(error: jsonschema.ValidationError, index: int) -> str:
        location = "/".join(str(part) for part in (index, *error.path))
        return f"{location}: {error.message}"


@lru_cache(maxsize=4)
def _record_validator(schema_root: Path) -> jsonschema.Validator:
    return AbiSchema(schema_root).validator_for()
