from typing import Any, Dict, Type

from pydantic import BaseModel


def generate_json_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """JSON Schema for tool discovery, keyed by the names callers send."""
    schema = model.model_json_schema(by_alias=False)
    if "title" not in schema:
        schema["title"] = model.__name__
    return schema
