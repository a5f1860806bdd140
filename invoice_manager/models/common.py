# invoice_manager/models/common.py

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for every API model: camelCase on the wire, snake_case in Python,
    and all string fields trimmed. NaN and infinity are rejected.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        from_attributes=True,
        allow_inf_nan=False,
    )
