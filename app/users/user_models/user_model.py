# app/users/user_models/user_model.py
from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String
from app.database.connection import Base
from app.helpers.time import utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, default="patient", nullable=False)
    name = Column(String, nullable=False, default="")
    phone = Column(String, nullable=True)

    # Patient or doctor record this account acts as (None for receptionists)
    subject_id = Column(Integer, nullable=True)

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Add check constraints for validation at database level
    __table_args__ = (
        CheckConstraint("role IN ('patient', 'doctor', 'receptionist')", name="check_role_values"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}', email='{self.email}', role='{self.role}')>"
