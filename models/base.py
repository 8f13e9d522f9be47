from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class MongoModel(BaseModel):
    # snake_case in Python and Mongo documents, camelCase on the wire
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)
