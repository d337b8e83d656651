from sqlalchemy.orm import Session

from finsarthi.core.security import get_password_hash
from finsarthi.db.session import SessionLocal
from finsarthi.models.user import User, UserRole


DEMO_COACHES = [
    {
        "full_name": "Priya Sharma",
        "email": "priya@finsteps.com",
        "phone": "9876543210",
        "password": "coachpass1",
        "age": 35,
        "city": "Mumbai",
        "gender": "female",
        "is_available": True,
    },
    {
        "full_name": "Rahul Verma",
        "email": "rahul@finsteps.com",
        "phone": "9876543211",
        "password": "coachpass2",
        "age": 42,
        "city": "Delhi",
        "gender": "male",
        "is_available": True,
    },
    {
        "full_name": "Anjali Mehta",
        "email": "anjali@finsteps.com",
        "phone": "9876543212",
        "password": "coachpass3",
        "age": 38,
        "city": "Bangalore",
        "gender": "female",
        "is_available": False,
    },
]

DEMO_CUSTOMERS = [
    {
        "full_name": "Amit Kumar",
        "email": "amit@example.com",
        "phone": "8765432109",
        "age": 28,
        "city": "Pune",
        "gender": "male",
    },
    {
        "full_name": "Sunita Patil",
        "email": "sunita@example.com",
        "phone": "8765432108",
        "age": 32,
        "city": "Nagpur",
        "gender": "female",
    },
]


def seed_demo_data(db: Session) -> int:
    """Insert demo coaches and customers that are not present yet; returns how many were added."""
    added = 0
    for entry in DEMO_COACHES:
        if db.query(User).filter(User.email == entry["email"]).first():
            continue
        data = dict(entry)
        password = data.pop("password")
        db.add(
            User(
                role=UserRole.COACH,
                country="India",
                hashed_password=get_password_hash(password),
                **data,
            )
        )
        added += 1
    for entry in DEMO_CUSTOMERS:
        if db.query(User).filter(User.email == entry["email"]).first():
            continue
        db.add(User(role=UserRole.CUSTOMER, country="India", **entry))
        added += 1
    db.commit()
    return added


if __name__ == "__main__":
    with SessionLocal() as session:
        print(f"Seeded {seed_demo_data(session)} demo users.")
