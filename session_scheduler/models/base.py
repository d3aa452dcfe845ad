from datetime import datetime
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

RawTimestamp = Union[int, float, str, datetime]


def _scalar_or_none(value: Any) -> Any:
    if isinstance(value, (int, float, str, datetime)):
        return value
    return None


# Epoch milliseconds, an ISO-8601 string or a datetime. Anything else (store
# timestamp objects, lists, ...) becomes None instead of failing validation,
# and unparsable strings resolve to "absent" when the engine normalizes them.
TimestampLike = Annotated[Optional[RawTimestamp], BeforeValidator(_scalar_or_none)]


class SnapshotModel(BaseModel):
    """
    Base for documents handed to the engine by the data layer.

    Accepts both snake_case and the camelCase keys used by the document store.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )
