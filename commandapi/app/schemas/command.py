from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CommandBase(BaseModel):
    # Wire format is camelCase (howTo, commandLine); snake_case is accepted on input too.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    how_to: str
    platform: str
    command_line: str


class CommandCreate(CommandBase):
    pass


class CommandUpdate(CommandBase):
    id: int | None = Field(default=None, description="Must match the id in the route")


class CommandOut(CommandBase):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
