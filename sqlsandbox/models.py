# sqlsandbox/models.py
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    # JSON bodies use camelCase keys
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SynthesisRequest(_CamelModel):
    prompt: Optional[str] = None


class SynthesisResult(_CamelModel):
    query: Any = None
    table_definition: Any = None
    seed_statements: Any = None


class ExecutionRequest(_CamelModel):
    query: Optional[str] = None
    table_definition: Optional[str] = None
    seed_statements: Optional[list[str]] = None


class ExecutionResult(_CamelModel):
    rows: list[dict[str, Any]]
