"""Builders for hand-written introspection schemas used across tests."""

import sys
import types
from typing import Any

from gql_querygen.core.schema import Schema


def named(kind: str, name: str) -> dict[str, Any]:
    return {"kind": kind, "name": name, "ofType": None}


def non_null(ref: dict[str, Any]) -> dict[str, Any]:
    return {"kind": "NON_NULL", "name": None, "ofType": ref}


def list_of(ref: dict[str, Any]) -> dict[str, Any]:
    return {"kind": "LIST", "name": None, "ofType": ref}


def scalar(name: str) -> dict[str, Any]:
    return named("SCALAR", name)


def obj(name: str) -> dict[str, Any]:
    return named("OBJECT", name)


def arg(name: str, type_ref: dict[str, Any]) -> dict[str, Any]:
    return {"name": name, "type": type_ref, "defaultValue": None}


def field(
    name: str,
    type_ref: dict[str, Any],
    args: list[dict[str, Any]] | None = None,
    deprecated: bool = False,
    reason: str | None = None,
    description: str | None = None,
) -> dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "type": type_ref,
        "args": args or [],
        "isDeprecated": deprecated,
        "deprecationReason": reason,
    }


def object_type(name: str, fields: list[dict[str, Any]], interfaces: list[str] = (), kind: str = "OBJECT",
                description: str | None = None) -> dict[str, Any]:
    return {
        "kind": kind,
        "name": name,
        "description": description,
        "fields": fields,
        "interfaces": [named("INTERFACE", i) for i in interfaces],
    }


def input_type(name: str, fields: list[dict[str, Any]]) -> dict[str, Any]:
    return {"kind": "INPUT_OBJECT", "name": name, "inputFields": fields}


def enum_type(name: str, values: list[str], description: str | None = None) -> dict[str, Any]:
    return {
        "kind": "ENUM",
        "name": name,
        "description": description,
        "enumValues": [{"name": value, "isDeprecated": False} for value in values],
    }


def scalar_type(name: str) -> dict[str, Any]:
    return {"kind": "SCALAR", "name": name}


def make_schema(*type_defs: dict[str, Any], query: str | None = "Query", mutation: str | None = None) -> Schema:
    payload = {
        "queryType": {"name": query} if query else None,
        "mutationType": {"name": mutation} if mutation else None,
        "types": list(type_defs),
    }
    return Schema.model_validate(payload)


def exec_module(code: str, name: str = "generated_client") -> types.ModuleType:
    """Execute generated code as an importable module."""
    module = types.ModuleType(name)
    sys.modules[name] = module
    try:
        exec(compile(code, f"{name}.py", "exec"), module.__dict__)
    except BaseException:
        del sys.modules[name]
        raise
    return module
