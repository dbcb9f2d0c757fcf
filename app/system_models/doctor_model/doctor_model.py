# app/system_models/doctor_model/doctor_model.py
from sqlalchemy import JSON, Column, DateTime, Integer, String
from app.database.connection import Base
from app.helpers.time import utcnow


class Doctor(Base):
    __tablename__ = "doctors"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    specialization = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)

    # Display catalog of "HH:MM" labels; bookings never remove entries
    available_slots = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    def __repr__(self):
        return f"<Doctor {self.id}: {self.name} ({self.specialization})>"
