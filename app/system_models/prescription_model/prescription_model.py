# app/system_models/prescription_model/prescription_model.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.helpers.time import utcnow


class Prescription(Base):
    __tablename__ = "prescriptions"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False)
    # One prescription closes exactly one appointment
    appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=False, unique=True)
    notes = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow)

    medicines = relationship(
        "PrescriptionMedicine",
        back_populates="prescription",
        order_by="PrescriptionMedicine.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class PrescriptionMedicine(Base):
    __tablename__ = "prescription_medicines"

    id = Column(Integer, primary_key=True)
    prescription_id = Column(Integer, ForeignKey("prescriptions.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False)

    medicine_id = Column(Integer, ForeignKey("medicines.id"), nullable=False)
    medicine_name = Column(String, nullable=False)  # snapshot of the catalog name
    dosage = Column(String, nullable=False)
    frequency = Column(String, nullable=False)
    duration = Column(String, nullable=False, default="")
    instructions = Column(Text, nullable=False, default="")

    prescription = relationship("Prescription", back_populates="medicines")
