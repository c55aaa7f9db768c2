from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StatsResponse(BaseModel):
    total_complaints: int
    high_severity: int
    medium_severity: int
    low_severity: int
    today_complaints: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
