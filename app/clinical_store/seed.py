# app/clinical_store/seed.py
"""
Demo catalog loaded into an empty store at startup.

Doctors and medicines are the reference catalog the clinic runs with; the
sample patient, appointment and prescription give every dashboard something
to show on first login.
"""
import logging

from app.clinical_store.snapshot import ClinicSnapshot

logger = logging.getLogger(__name__)


DEMO_DOCTORS = [
    {
        "id": 1,
        "name": "Dr. Sarah Smith",
        "specialization": "Cardiology",
        "email": "doctor@hospital.com",
        "phone": "+1-234-567-8901",
        "available_slots": ["09:00", "10:00", "11:00", "14:00", "15:00", "16:00"],
    },
    {
        "id": 2,
        "name": "Dr. Michael Brown",
        "specialization": "Neurology",
        "email": "michael@hospital.com",
        "phone": "+1-234-567-8903",
        "available_slots": ["08:00", "09:00", "10:00", "13:00", "14:00", "15:00"],
    },
    {
        "id": 3,
        "name": "Dr. Emily Davis",
        "specialization": "Pediatrics",
        "email": "emily@hospital.com",
        "phone": "+1-234-567-8904",
        "available_slots": ["09:00", "11:00", "13:00", "14:00", "16:00", "17:00"],
    },
]

DEMO_MEDICINES = [
    {"id": 1, "name": "Aspirin", "category": "Pain Relief", "description": "Pain reliever and fever reducer"},
    {"id": 2, "name": "Amoxicillin", "category": "Antibiotic", "description": "Antibiotic for bacterial infections"},
    {"id": 3, "name": "Lisinopril", "category": "Blood Pressure", "description": "ACE inhibitor for high blood pressure"},
]

DEMO_PATIENTS = [
    {
        "id": 1,
        "name": "John Doe",
        "email": "patient@hospital.com",
        "phone": "+1-234-567-8900",
        "address": "123 Main St, City, State",
        "date_of_birth": "1990-05-15",
        "gender": "Male",
    },
]

DEMO_APPOINTMENTS = [
    {
        "id": 1,
        "patient_id": 1,
        "doctor_id": 1,
        "date": "2025-08-10",
        "time": "10:00",
        "status": "scheduled",
        "reason": "Regular checkup",
    },
]

# Prescription history from an earlier, already completed visit
DEMO_HISTORY_APPOINTMENT = {
    "id": 2,
    "patient_id": 1,
    "doctor_id": 1,
    "date": "2025-07-01",
    "time": "09:00",
    "status": "completed",
    "reason": "Headache follow-up",
}

DEMO_PRESCRIPTIONS = [
    {
        "id": 1,
        "patient_id": 1,
        "doctor_id": 1,
        "appointment_id": 2,
        "medicines": [
            {
                "medicine_id": 1,
                "medicine_name": "Aspirin",
                "dosage": "500mg",
                "frequency": "Twice daily",
                "duration": "7 days",
                "instructions": "Take with food",
            }
        ],
        "notes": "Continue current medication",
    },
]


def demo_snapshot() -> ClinicSnapshot:
    return ClinicSnapshot(
        doctors=DEMO_DOCTORS,
        medicines=DEMO_MEDICINES,
        patients=DEMO_PATIENTS,
        appointments=DEMO_APPOINTMENTS + [DEMO_HISTORY_APPOINTMENT],
        prescriptions=DEMO_PRESCRIPTIONS,
    )


def seed_demo_data(store) -> None:
    """Load the demo catalog into `store`, replacing whatever it holds."""
    store.load_snapshot(demo_snapshot())
    logger.info("🌱 Demo clinic data seeded")
