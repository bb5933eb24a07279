"""Base model for schemas exchanged with the model and over HTTP."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case attributes in Python, camelCase field names on the wire.

    Accepts either spelling on input; dump with ``by_alias=True`` to get the
    wire form.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
