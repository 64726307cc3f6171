# backend/schemas/base.py
import math
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


def _finite_or_none(value: float) -> Optional[float]:
    return None if math.isnan(value) else value


# Numbers read back from a sheet; an unparseable cell is NaN and goes out as null
SheetNumber = Annotated[float, PlainSerializer(_finite_or_none, return_type=Optional[float])]


# Wire format is camelCase (srNo, pricePerUnit, ...); Python side stays snake_case
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
