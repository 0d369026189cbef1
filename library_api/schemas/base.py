from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):  # type: ignore[misc]
    """Read model serialized with camelCase keys (``authorId``, ``imagePath``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
