import logging

import pydantic
from packaging.version import parse
from pydantic.version import VERSION

logger = logging.getLogger(__name__)

version_parsed = parse(str(VERSION))

if version_parsed.major >= 2:
    PydanticVersion = 2
    from pydantic import ConfigDict
else:
    PydanticVersion = 1
    ConfigDict = None  # type: ignore[assignment,misc]

# 2.11 renamed populate_by_name to validate_by_name / validate_by_alias
PYDANTIC_V2_11_PLUS = (version_parsed.major, version_parsed.minor) >= (2, 11)

logger.debug("Running on Pydantic %s", VERSION)


BaseModel: type = pydantic.BaseModel
Field: type = pydantic.Field
ValidationError: type = pydantic.ValidationError


def get_model_config(**extra) -> dict:
    """Config that lets models be populated by field name or alias."""
    if PYDANTIC_V2_11_PLUS:
        config = {"validate_by_name": True, "validate_by_alias": True}
    else:
        config = {"populate_by_name": True}
    config.update(extra)
    return config


# Pydantic V1: __fields__; Pydantic V2: model_fields
def get_model_fields(cls: type) -> dict:
    if PydanticVersion == 1:
        return getattr(cls, "__fields__", {})
    return getattr(cls, "model_fields", {})  # type: ignore[attr-defined]


def get_field_annotation(field_info) -> object:
    """Declared type of a field (``FieldInfo.annotation`` / ``ModelField.outer_type_``)."""
    if PydanticVersion == 1:
        return field_info.outer_type_
    return field_info.annotation


def model_dump_compat(model, **kwargs) -> dict:
    """``model_dump()`` on V2, ``dict()`` on V1."""
    if PydanticVersion == 1:
        return model.dict(**kwargs)
    return model.model_dump(**kwargs)


def model_construct_compat(cls: type, **values):
    """Build ``cls`` from ``values`` without validation (``model_construct`` / ``construct``)."""
    if PydanticVersion == 1:
        return cls.construct(**values)
    return cls.model_construct(**values)


__all__ = [
    "BaseModel",
    "Field",
    "ConfigDict",
    "get_model_config",
    "get_model_fields",
    "get_field_annotation",
    "model_dump_compat",
    "model_construct_compat",
    "ValidationError",
    "PydanticVersion",
    "PYDANTIC_V2_11_PLUS",
]
