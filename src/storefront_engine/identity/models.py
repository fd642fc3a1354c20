"""SQLAlchemy models for identities and profiles."""

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from storefront_engine.auth.roles import Role
from storefront_engine.common.models import Base, TimestampMixin, generate_uuid


class IdentityModel(Base, TimestampMixin):
    """Credentials held by the local identity provider.

    With the remote backend this table stays empty; the provider owns
    credentials and we only keep profiles.
    """

    __tablename__ = "identities"
    __privileged__ = True

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    metadata_: Mapped[dict] = mapped_column("metadata", JSON, default=dict)


class ProfileModel(Base, TimestampMixin):
    __tablename__ = "profiles"
    __privileged__ = True

    # Same id as the identity it describes.
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    full_name: Mapped[str] = mapped_column(String(255), default="")
    role: Mapped[str] = mapped_column(String(20), default=Role.MERCHANT.value, nullable=False)
