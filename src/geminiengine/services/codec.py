"""JSON codec between Python payloads and the API wire format."""

import json
from typing import Any, TypeVar

import pydantic_core
from pydantic import BaseModel, TypeAdapter

from geminiengine.exceptions import SerializationError
from geminiengine.models.errors import ApiErrorResponse

T = TypeVar("T")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Out of range float values are not JSON compliant: {name}")


class Codec:
    """
    Encodes request bodies and decodes response bodies.

    Request bodies may be pydantic models, dicts, lists or any value pydantic
    can serialize. A top-level model is written with its wire aliases and
    without None fields; dicts and lists are written as given, explicit None
    values included. NaN and infinite floats are rejected.

    Responses are validated into the caller-specified type, which may be a
    pydantic model or any type a TypeAdapter accepts (``dict``,
    ``list[Foo]``, ...).
    """

    def __init__(self):
        self._adapters: dict[Any, TypeAdapter] = {}

    def encode(self, body: Any) -> bytes:
        """
        Serialize a request body to JSON bytes.

        Raises:
            SerializationError: If the body cannot be represented as JSON
        """
        try:
            payload = pydantic_core.to_json(body, by_alias=True, exclude_none=isinstance(body, BaseModel))
            # pydantic writes NaN and Infinity as bare constants, which the API rejects
            json.loads(payload, parse_constant=_reject_constant)
        except (pydantic_core.PydanticSerializationError, TypeError, ValueError) as e:
            raise SerializationError(
                f"Failed to serialize request body of type {type(body).__name__}: {str(e)}",
                original_exception=e,
            ) from e
        return payload

    def decode(self, raw: str | bytes, response_type: type[T]) -> T:
        """
        Deserialize a JSON body into ``response_type``.

        Raises:
            pydantic.ValidationError: If the body is not JSON or does not match the type
        """
        return self._adapter_for(response_type).validate_json(raw)

    def decode_error_envelope(self, raw: str | bytes) -> ApiErrorResponse:
        """
        Deserialize a failure body as the API's error envelope.

        Raises:
            pydantic.ValidationError: If the body is not a JSON object of the envelope's shape
        """
        return ApiErrorResponse.model_validate_json(raw)

    def _adapter_for(self, response_type: Any) -> TypeAdapter:
        adapter = self._adapters.get(response_type)
        if adapter is None:
            adapter = TypeAdapter(response_type)
            self._adapters[response_type] = adapter
        return adapter
