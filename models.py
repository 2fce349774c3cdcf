# models.py - Flask-SQLAlchemy models for the partner CRM
from flask_login import UserMixin
from sqlalchemy import Index
from werkzeug.security import check_password_hash, generate_password_hash

from extensions import db
from hierarchy.nodes import PartnerRecord
from hierarchy.taxonomy import PartnerRole, linkage_field

# ===========================================================
# BASE MIXIN FOR COMMON FIELDS
# ===========================================================

class BaseMixin:
    """Provides created_at and updated_at timestamps to inheriting models."""
    created_at = db.Column(db.DateTime(timezone=True), default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True),
                           default=db.func.now(),
                           onupdate=db.func.now())

# ===========================================================
# PARTNER MODEL
# ===========================================================

class Partner(db.Model, UserMixin, BaseMixin):
    """
    One partner at any tier. Universe funds identify themselves with
    universe_fund_id; every other tier carries unique_id plus the
    (parent_id, parent_type) reference to its owner one tier up.
    """
    __tablename__ = 'partners'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(20), nullable=False)
    email = db.Column(db.String(120), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)

    user_type = db.Column(db.String(20), nullable=False, index=True)
    universe_fund_id = db.Column(db.String(64), unique=True, nullable=True)
    unique_id = db.Column(db.String(64), unique=True, nullable=True)
    parent_id = db.Column(db.String(64), nullable=True)
    parent_type = db.Column(db.String(20), nullable=True)

    __table_args__ = (
        # child lookups: WHERE user_type = ? AND parent_id = ? AND parent_type = ?
        Index('idx_partner_parent_lookup', 'user_type', 'parent_id', 'parent_type'),
        Index('idx_partner_phone', 'phone'),
    )

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    @property
    def role(self) -> PartnerRole:
        return PartnerRole.parse(self.user_type)

    @property
    def linkage_key(self):
        if self.role is PartnerRole.UNIVERSE_FUND:
            return self.universe_fund_id
        return self.unique_id

    def to_record(self) -> PartnerRecord:
        return PartnerRecord(
            id=self.id,
            name=self.name,
            phone=self.phone,
            role=self.role,
            linkage_key=self.linkage_key,
            parent_id=self.parent_id,
            parent_role=PartnerRole.parse(self.parent_type) if self.parent_type else None,
        )

    def to_dict(self):
        """Public profile; never includes the password hash."""
        result = {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "userType": self.user_type,
            linkage_field(self.role): self.linkage_key,
        }
        if self.parent_id:
            result["parentId"] = self.parent_id
            result["parentType"] = self.parent_type
        return result

    def __repr__(self):
        return f"<Partner {self.id} {self.user_type} {self.linkage_key}>"
