import uuid
from datetime import datetime, timedelta

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from trafficwatch.models.base import AppUser, Base, Violation
from trafficwatch.schema import Actor
from trafficwatch.utils.security import create_jwt_token

engine = create_engine("sqlite://",
                       connect_args={"check_same_thread": False},
                       poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

USER = Actor(id="u1", role="user")
OTHER_USER = Actor(id="u2", role="user")
SUB_ADMIN = Actor(id="s1", role="sub_admin")
ADMIN = Actor(id="a1", role="admin")


def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def violation_input(**overrides):
    payload = {
        "type": "speeding",
        "description": "Car doing 90 in a 50 zone",
        "location": "Main St & 5th Ave",
        "vehiclePlate": "ABC-123",
        "vehicleModel": "Corolla",
        "vehicleColor": "",
        "dateTime": "2026-10-01T08:30:00Z",
        "reporterName": "Jane Doe",
        "reporterEmail": "jane@example.com",
    }
    payload.update(overrides)
    return payload


def insert_violation(db, owner_id="u1", created_at=None, **overrides):
    values = {
        "id": str(uuid.uuid4()),
        "user_id": owner_id,
        "type": "red_light",
        "description": "Ran the red light",
        "location": "Elm St",
        "vehicle_plate": "XYZ-987",
        "date_time": datetime(2026, 9, 1, 12, 0, 0),
        "reporter_name": "John Roe",
        "reporter_email": "john@example.com",
        "status": "pending",
        "created_at": created_at or datetime(2026, 9, 1, 12, 0, 0),
    }
    values.update(overrides)
    violation = Violation(**values)
    db.add(violation)
    db.commit()
    db.refresh(violation)
    return violation


def insert_user(db, user_id, role="user", email=None):
    user = AppUser(id=user_id, email=email or f"{user_id}@example.com", name=user_id, role=role)
    db.add(user)
    db.commit()
    return user


def token_for(user_id, role=None):
    # shaped like the identity provider's access tokens
    claims = {"sub": user_id, "role": "authenticated", "email": f"{user_id}@example.com", "user_metadata": {}}
    if role is not None:
        claims["user_metadata"]["role"] = role
    return create_jwt_token(claims, datetime.utcnow() + timedelta(hours=1))


def auth_header(user_id, role=None):
    return {"Authorization": f"Bearer {token_for(user_id, role)}"}
