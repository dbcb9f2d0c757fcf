# app/model_registry/__init__.py


# Register all models here

# User models
from app.users.user_models.user_model import User

# Clinical models
from app.system_models.doctor_model.doctor_model import Doctor
from app.system_models.patient_model.patient_model import Patient
from app.system_models.appointment_model.appointment_model import Appointment
from app.system_models.medicine_model.medicine_model import Medicine
from app.system_models.prescription_model.prescription_model import Prescription, PrescriptionMedicine
