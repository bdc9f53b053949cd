"""Common schemas used across wallet requests."""

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from hedera_wallet.exceptions import InvalidParams


class RequestModel(BaseModel):
    """Base for request params.

    Pages send camelCase keys; snake_case is accepted as well.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def validation_details(exc: ValidationError) -> dict[str, Any]:
    """Flatten a pydantic error into InvalidParams details."""
    return {
        "errors": [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
    }


def parse_request(model: type[BaseModel], params: Any) -> Any:
    """Validate raw request params into ``model``.

    Raises:
        InvalidParams: If the params do not validate
    """
    try:
        return model.model_validate(params)
    except ValidationError as e:
        raise InvalidParams(
            message=f"Invalid {model.__name__} parameters",
            details=validation_details(e),
        ) from e
