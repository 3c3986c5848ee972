from trafficwatch.service.auth_service import AuthService
from trafficwatch.service.user_service import UserService
from trafficwatch.service.violation_service import ViolationService
