"""Request and response helpers shared by the blueprints."""

from typing import Iterable, Type, TypeVar

from flask import current_app, jsonify, request
from pydantic import BaseModel

from ..errors import InvalidRequestError
from .app import EXTENSION_KEY, Services

Schema = TypeVar("Schema", bound=BaseModel)


def services() -> Services:
    """The managers bound to the running application."""
    return current_app.extensions[EXTENSION_KEY]


def parse_body(schema: Type[Schema]) -> Schema:
    """Validate the JSON request body against a schema.

    Raises:
        InvalidRequestError: Body is missing or not JSON
        pydantic.ValidationError: Body does not match the schema
    """
    data = request.get_json(silent=True)
    if data is None:
        raise InvalidRequestError("Request body must be JSON")
    return schema.model_validate(data)


def dump(schema: Type[BaseModel], obj, status: int = 200):
    """Serialize one ORM object through a response schema."""
    return jsonify(schema.model_validate(obj).model_dump(mode="json")), status


def dump_many(schema: Type[BaseModel], objs: Iterable, status: int = 200):
    """Serialize a list of ORM objects through a response schema."""
    return jsonify([schema.model_validate(o).model_dump(mode="json") for o in objs]), status
