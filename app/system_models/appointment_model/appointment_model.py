# app/system_models/appointment_model/appointment_model.py
from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, String, Text
from app.database.connection import Base
from app.helpers.time import utcnow
from app.clinical_store.lifecycle import INITIAL_STATUS, STATUS_VALUES


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    time = Column(String, nullable=False)
    reason = Column(Text, nullable=False, default="")
    status = Column(String, nullable=False, default=INITIAL_STATUS.value)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in STATUS_VALUES) + ")",
            name="check_appointment_status_values",
        ),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self):
        return f"<Appointment {self.id}: patient={self.patient_id} doctor={self.doctor_id} {self.date} {self.time} [{self.status}]>"
