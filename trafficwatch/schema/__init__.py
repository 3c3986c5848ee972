from trafficwatch.schema.actor import Actor
from trafficwatch.schema.user_schema import UpdateRoleSchema, UserSchema
from trafficwatch.schema.violation import (CreateViolationInput,
                                           ViolationFilters,
                                           ViolationPatch,
                                           ViolationRecord)
