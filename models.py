"""
Database Models
SQLAlchemy ORM models for DoseTrack
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, Date, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime

from config import TableNames, schedule_config
from database import Base


# ==================== MODELS ====================

class Patient(Base):
    """Patient who receives prescriptions and logs doses"""
    __tablename__ = TableNames.PATIENTS

    id = Column(Integer, primary_key=True, index=True)

    # Personal info
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(20))

    # Status
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    prescriptions = relationship("Prescription", back_populates="patient", cascade="all, delete-orphan")
    dose_records = relationship("DoseRecord", back_populates="patient", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Prescription(Base):
    """Prescription written by a doctor, read-only to the schedule engine"""
    __tablename__ = TableNames.PRESCRIPTIONS

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False)

    # Prescription details
    doctor_name = Column(String(255))
    diagnosis = Column(String(255))
    instructions = Column(Text)

    # Delivery
    sent_to_patient = Column(Boolean, default=False, nullable=False)
    sent_at = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    patient = relationship("Patient", back_populates="prescriptions")
    medicines = relationship(
        "PrescriptionMedicine",
        back_populates="prescription",
        cascade="all, delete-orphan",
        order_by="PrescriptionMedicine.position",
        lazy="selectin"
    )
    dose_records = relationship("DoseRecord", back_populates="prescription")

    __table_args__ = (
        Index("ix_prescriptions_patient_sent", "patient_id", "sent_to_patient"),
    )


class PrescriptionMedicine(Base):
    """One medicine entry within a prescription's ordered list"""
    __tablename__ = TableNames.PRESCRIPTION_MEDICINES

    id = Column(Integer, primary_key=True, index=True)
    prescription_id = Column(Integer, ForeignKey("prescriptions.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    # Display fields
    name = Column(String(255), nullable=False)
    dosage = Column(String(100))  # e.g., "500mg"
    frequency = Column(String(100))  # "twice daily"
    duration = Column(String(100))  # free text: "5 days", "2 weeks", "1 month", "10"
    time_of_day = Column(String(8))  # optional "HH:MM:SS"
    notes = Column(Text)

    # Relationships
    prescription = relationship("Prescription", back_populates="medicines")


class DoseRecord(Base):
    """One scheduled instance of taking one medicine on one calendar day"""
    __tablename__ = TableNames.DOSE_RECORDS

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False)
    prescription_id = Column(Integer, ForeignKey("prescriptions.id"), nullable=False)
    medicine_id = Column(Integer, ForeignKey("prescription_medicines.id"), nullable=False)
    medicine_name = Column(String(255), nullable=False)

    # Schedule details
    scheduled_date = Column(Date, nullable=False)
    scheduled_time = Column(String(8), nullable=False, default=schedule_config.DEFAULT_SCHEDULED_TIME)

    # Status
    is_taken = Column(Boolean, nullable=False, default=False)
    is_skipped = Column(Boolean, nullable=False, default=False)
    taken_at = Column(DateTime)
    skipped_at = Column(DateTime)
    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    patient = relationship("Patient", back_populates="dose_records")
    prescription = relationship("Prescription", back_populates="dose_records")
    medicine = relationship("PrescriptionMedicine")

    __table_args__ = (
        UniqueConstraint("prescription_id", "medicine_id", "scheduled_date", name="uq_dose_record_slot"),
        Index("ix_dose_records_patient_date", "patient_id", "scheduled_date"),
    )
