# Import every model so Base.metadata is complete for alembic and create_all.
from trafficwatch.models.base_class import Base
from trafficwatch.models.violation import Violation
from trafficwatch.models.app_user import AppUser
