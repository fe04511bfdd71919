from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class JsonBody(BaseModel):
    """Request body whose fields are sent in camelCase by the frontend."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )
