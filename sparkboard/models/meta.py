from typing import Any

from pydantic import BaseModel, ValidationError as PydanticValidationError, create_model

from sparkboard.exceptions import ValidationError


def create_partial_model(model: type[BaseModel]) -> type[BaseModel]:
    """Create a version of a row model where every column is optional.

    Used to validate column patches, where only the columns being changed are
    provided.
    """
    optional_columns = {
        name: (field_info.annotation | None, None)
        for name, field_info in model.model_fields.items()
    }
    return create_model(f'{model.__name__}Partial', __base__=(model,), **optional_columns)


def build_patch(partial_model: type[BaseModel], **columns: Any) -> dict[str, Any]:
    """
    Validate a column patch and return only the columns being changed.

    :param partial_model: Model built with ``create_partial_model``
    :param columns: New column values
    :return: Patch body for an update request
    :raises ValidationError: If a value has the wrong type or no column is given
    """
    try:
        patch = partial_model(**columns).model_dump(exclude_unset=True)
    except PydanticValidationError as e:
        error = e.errors()[0]
        column = '.'.join(str(part) for part in error['loc'])
        raise ValidationError(f"Invalid value for {column}: {error['msg']}") from e
    if not patch:
        raise ValidationError("Nothing to update")
    return patch
