from pydantic import BaseModel, Field, AliasChoices


class ReportCreate(BaseModel):
    reporter_id: str = Field(min_length=1, validation_alias=AliasChoices("reporterId", "reporter_id"))
    reported_id: str = Field(min_length=1, validation_alias=AliasChoices("reportedId", "reported_id"))
    explanation: str = Field(default="", max_length=2000)


