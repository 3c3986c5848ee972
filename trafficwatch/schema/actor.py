from pydantic import BaseModel, ConfigDict

from trafficwatch.utils.enum import Role


class Actor(BaseModel):
    """The authenticated caller of a request, resolved at the identity boundary."""

    model_config = ConfigDict(frozen=True)

    id: str
    role: Role
