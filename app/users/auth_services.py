# app/users/auth_services.py
"""
Identity Provider
Authenticates principals and issues access tokens.

Accounts live beside the clinical collections but are owned here, not by the
Clinical Store. Self-registration always yields a patient: the patient record
is created through the store and the new account is linked to it.
"""
import logging
import threading
from datetime import timedelta
from typing import Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.engine import Engine

from app.clinical_store.authorization import Principal, Role
from app.clinical_store.store import ClinicalStore
from app.database.connection import create_session_factory
from app.system_models.patient_model.patient_schemas import PatientCreate
from app.users.security import create_access_token, decode_token, get_password_hash, verify_password
from app.users.user_models.schemas import AccountCreate, UserLogin, UserRegister, UserResponse
from app.users.user_models.user_model import User

logger = logging.getLogger(__name__)


DEMO_PASSWORD = "password123"

DEMO_ACCOUNTS = [
    {"email": "patient@hospital.com", "role": "patient", "name": "John Doe",
     "phone": "+1-234-567-8900", "subject_id": 1},
    {"email": "doctor@hospital.com", "role": "doctor", "name": "Dr. Sarah Smith",
     "phone": "+1-234-567-8901", "subject_id": 1},
    {"email": "michael@hospital.com", "role": "doctor", "name": "Dr. Michael Brown",
     "phone": "+1-234-567-8903", "subject_id": 2},
    {"email": "emily@hospital.com", "role": "doctor", "name": "Dr. Emily Davis",
     "phone": "+1-234-567-8904", "subject_id": 3},
    {"email": "receptionist@hospital.com", "role": "receptionist", "name": "Mary Johnson",
     "phone": "+1-234-567-8902", "subject_id": None},
]


class IdentityProvider:
    def __init__(
        self,
        engine: Engine,
        store: ClinicalStore,
        secret_key: str,
        algorithm: str = "HS256",
        access_token_expiry: int = 60,
    ):
        self._session_factory = create_session_factory(engine)
        self._store = store
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expiry = timedelta(minutes=access_token_expiry)
        self._lock = threading.RLock()

    # ============================================================
    # ✅ ACCOUNTS
    # ============================================================
    def get_account(self, account_id: int) -> Optional[UserResponse]:
        with self._session_factory() as session:
            user = session.get(User, account_id)
            return UserResponse.model_validate(user) if user else None

    def get_account_by_email(self, email: str) -> Optional[UserResponse]:
        with self._session_factory() as session:
            user = session.scalars(select(User).where(User.email == email.strip().lower())).first()
            return UserResponse.model_validate(user) if user else None

    @staticmethod
    def _insert_account(session, data: AccountCreate) -> UserResponse:
        email = str(data.email).lower()
        if session.scalars(select(User).where(User.email == email)).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User already exists with this email",
            )
        user = User(
            email=email,
            hashed_password=get_password_hash(data.password),
            role=data.role,
            name=data.name,
            phone=data.phone,
            subject_id=data.subject_id,
            is_active=True,
        )
        session.add(user)
        session.flush()
        return UserResponse.model_validate(user)

    def create_account(self, data: AccountCreate) -> UserResponse:
        with self._lock, self._session_factory() as session, session.begin():
            result = self._insert_account(session, data)

        logger.info(f"Account {result.id} created ({result.role})")
        return result

    def seed_demo_accounts(self) -> None:
        for account in DEMO_ACCOUNTS:
            if self.get_account_by_email(account["email"]) is None:
                self.create_account(AccountCreate(password=DEMO_PASSWORD, **account))

    # ============================================================
    # ✅ AUTHENTICATE USER
    # ============================================================
    def authenticate(self, email: str, password: str) -> Optional[UserResponse]:
        with self._session_factory() as session:
            user = session.scalars(select(User).where(User.email == email.strip().lower())).first()
            if not user:
                return None
            if not verify_password(password, user.hashed_password):
                return None
            return UserResponse.model_validate(user)

    # ============================================================
    # ✅ LOGIN USER
    # ============================================================
    def login(self, credentials: UserLogin) -> Tuple[str, UserResponse]:
        user = self.authenticate(str(credentials.email), credentials.password)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if not user.is_active:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive")

        logger.info(f"🔑 {user.role} {user.email} logged in")
        return self.issue_token(user), user

    # ============================================================
    # ✅ REGISTER A NEW PATIENT
    # ============================================================
    def register(self, data: UserRegister) -> Tuple[str, UserResponse]:
        with self._lock:
            if self.get_account_by_email(str(data.email)):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="User already exists with this email",
                )

            accounts = []

            # Account row goes into the patient's transaction: both or neither
            def link_account(session, patient):
                accounts.append(
                    self._insert_account(
                        session,
                        AccountCreate(
                            email=data.email,
                            password=data.password,
                            role="patient",
                            name=data.name,
                            phone=data.phone,
                            subject_id=patient.id,
                        ),
                    )
                )

            self._store.add_patient(
                Principal.self_registration(),
                PatientCreate(
                    name=data.name,
                    email=str(data.email),
                    phone=data.phone,
                    address=data.address,
                    date_of_birth=data.date_of_birth,
                    gender=data.gender,
                ),
                on_created=link_account,
            )
            user = accounts[0]

        logger.info(f"Account {user.id} created ({user.role}) for patient {user.subject_id}")
        return self.issue_token(user), user

    # ============================================================
    # ✅ TOKENS
    # ============================================================
    def issue_token(self, user: UserResponse) -> str:
        return create_access_token(
            {"sub": str(user.id), "role": user.role, "subject_id": user.subject_id},
            self._secret_key,
            self._algorithm,
            self._expiry,
        )

    def resolve_token(self, token: str) -> Optional[Principal]:
        """Turn a bearer token into the acting principal, or None if invalid."""
        payload = decode_token(token, self._secret_key, self._algorithm)
        if not payload or payload.get("type") != "access":
            return None
        try:
            account_id = int(payload.get("sub"))
        except (TypeError, ValueError):
            return None

        user = self.get_account(account_id)
        if user is None or not user.is_active:
            return None
        return principal_for(user)


def principal_for(user: UserResponse) -> Principal:
    return Principal(
        role=Role(user.role),
        subject_id=user.subject_id,
        account_id=user.id,
        name=user.name,
        profile=user.model_dump(),
    )
