from sqlalchemy import Boolean, Column, Integer, String, DateTime, Text, Enum
import enum

from gymflow.core.timezone_utils import utcnow
from gymflow.db.base_class import Base


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"      # Administrador de la plataforma
    GYM = "GYM"          # Cuenta de gimnasio (tabla gyms)
    TRAINER = "TRAINER"  # Entrenador
    MEMBER = "MEMBER"    # Miembro regular


class User(Base):
    """
    Cuentas de administradores, entrenadores y miembros.
    Los gimnasios tienen su propia tabla (``gyms``).
    """
    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)
    role = Column(Enum(UserRole), default=UserRole.MEMBER, nullable=False)
    is_active = Column(Boolean(), default=True)
    phone_number = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, onupdate=utcnow)
