# truefans/modules/digital_passes/models/pass_models.py

from sqlalchemy import (Column, Integer, String, ForeignKey, DateTime,
                        Boolean, JSON, Enum as SQLEnum, Index, CheckConstraint)
from sqlalchemy.orm import relationship
from enum import Enum

from truefans.core.database import Base
from truefans.core.mixins import TimestampMixin


class PassStatus(str, Enum):
    """Lifecycle status of a digital pass"""
    ACTIVE = "active"          # Can be validated at point-of-sale
    SUSPENDED = "suspended"    # Temporarily blocked by the restaurant
    REVOKED = "revoked"        # Permanently withdrawn


class User(Base, TimestampMixin):
    """Platform user; only the fields the pass endpoints read"""
    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True, index=True)

    # Set for restaurant staff
    restaurant_id = Column(String(64), ForeignKey("restaurants.id"), nullable=True)

    passes = relationship("DigitalPass", back_populates="user")

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def __repr__(self):
        return f"<User(id='{self.id}', email='{self.email}')>"


class Restaurant(Base, TimestampMixin):
    """Restaurant with its wallet branding"""
    __tablename__ = "restaurants"

    id = Column(String(64), primary_key=True)
    name = Column(String(200), nullable=False)

    # logo, primaryColor, secondaryColor, customMessage, cardBackground, cardTextColor
    digital_wallet = Column(JSON, nullable=True)

    passes = relationship("DigitalPass", back_populates="restaurant")

    @property
    def wallet_branding(self) -> dict:
        return self.digital_wallet or {}

    def __repr__(self):
        return f"<Restaurant(id='{self.id}', name='{self.name}')>"


class DigitalPass(Base, TimestampMixin):
    """Loyalty pass tying a user (or anonymous diner) to a restaurant"""
    __tablename__ = "digital_passes"

    id = Column(Integer, primary_key=True, index=True)
    pass_id = Column(String(64), nullable=False, unique=True, index=True)

    user_id = Column(String(64), ForeignKey("users.id"), nullable=True, index=True)
    restaurant_id = Column(String(64), ForeignKey("restaurants.id"), nullable=False, index=True)

    # Counters
    points = Column(Integer, nullable=False, default=0)
    visits = Column(Integer, nullable=False, default=0)

    # State
    is_active = Column(Boolean, nullable=False, default=True)
    status = Column(
        SQLEnum(PassStatus, name="passstatus", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=PassStatus.ACTIVE,
    )
    expires_at = Column(DateTime, nullable=True)
    last_used_at = Column(DateTime, nullable=True)
    last_visit_at = Column(DateTime, nullable=True)

    # Diner details for passes issued without an account
    holder_name = Column(String(200), nullable=True)
    holder_phone = Column(String(30), nullable=True)
    holder_birthday = Column(String(20), nullable=True)

    # Wallet provider references
    wallet_serial_number = Column(String(100), nullable=True)
    wallet_download_url = Column(String(500), nullable=True)

    user = relationship("User", back_populates="passes")
    restaurant = relationship("Restaurant", back_populates="passes")

    __table_args__ = (
        Index("idx_digital_pass_validation", "pass_id", "restaurant_id", "is_active", "status"),
        CheckConstraint("points >= 0", name="check_pass_points_non_negative"),
        CheckConstraint("visits >= 0", name="check_pass_visits_non_negative"),
    )

    def __repr__(self):
        return f"<DigitalPass(pass_id='{self.pass_id}', restaurant_id='{self.restaurant_id}', visits={self.visits})>"
