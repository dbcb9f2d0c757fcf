# app/system_models/medicine_model/medicine_model.py
from sqlalchemy import Column, Integer, String, Text
from app.database.connection import Base


class Medicine(Base):
    __tablename__ = "medicines"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    category = Column(String, nullable=True)
    description = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Medicine {self.id}: {self.name}>"
