# ==========================================================================================================
# -------------- Partner registration and credential checks ------------------------------------------------
# ==========================================================================================================
import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from extensions import db
from hierarchy.errors import InvalidCredentials, RegistrationError, StoreUnavailable
from hierarchy.taxonomy import PartnerRole, parent_role
from models import Partner
from utils import clean, validate_email, validate_phone


logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def register_partner(data: Dict[str, Any]) -> Partner:
    """
    Create a partner from a registration payload.

    Universe funds need `universeFundId`; every other tier needs `uniqueId`,
    `parentId` and `parentType`, where `parentType` must be the tier directly
    above `role`. The parent itself does not have to exist yet: such a
    partner is stored but stays out of every hierarchy until its parent
    registers.
    """
    name = clean(data.get("name"))
    phone = clean(data.get("phone"))
    email = clean(data.get("email")).lower()
    password = data.get("password") or ""

    if not name or not phone or not email or not password:
        raise RegistrationError("Name, phone, email and password are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise RegistrationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if not validate_phone(phone):
        raise RegistrationError("Invalid phone number")
    if not validate_email(email):
        raise RegistrationError("Invalid email address")

    role = PartnerRole.parse(data.get("role") or data.get("userType"))
    partner = Partner(name=name, phone=phone, email=email, user_type=role.label)
    partner.set_password(password)
    expected_parent = parent_role(role)

    if role is PartnerRole.UNIVERSE_FUND:
        universe_fund_id = clean(data.get("universeFundId"))
        if not universe_fund_id:
            raise RegistrationError("Universe Fund ID is required")
        partner.universe_fund_id = universe_fund_id
    else:
        unique_id = clean(data.get("uniqueId"))
        parent_id = clean(data.get("parentId"))
        parent_type = data.get("parentType")
        if not unique_id or not parent_id or not parent_type:
            raise RegistrationError("Unique ID, Parent ID, and Parent Type are required")

        if PartnerRole.parse(parent_type) is not expected_parent:
            raise RegistrationError(
                f"A {role.label} must report to a {expected_parent.label}, not {parent_type!r}"
            )
        partner.unique_id = unique_id
        partner.parent_id = parent_id
        partner.parent_type = expected_parent.label

    try:
        if _linkage_key_taken(role, partner.linkage_key):
            raise RegistrationError(f"{partner.linkage_key!r} is already registered")

        if partner.parent_id and not _parent_exists(partner.parent_id, expected_parent):
            logger.warning(
                f"Registering {role.label} {partner.unique_id!r} under unknown "
                f"{expected_parent.label} {partner.parent_id!r}; it stays detached until the parent exists"
            )

        db.session.add(partner)
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        raise RegistrationError(f"{partner.linkage_key!r} is already registered") from e
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error registering {role.label} {partner.linkage_key!r}: {e}")
        raise StoreUnavailable("Partner store unavailable during registration") from e

    logger.info(f"Registered {role.label} {partner.linkage_key!r} as partner id={partner.id}")
    return partner


def authenticate_partner(data: Dict[str, Any]) -> Optional[Partner]:
    """
    Look a partner up by tier and linkage key. Returns None when no such
    partner exists; raises InvalidCredentials on a wrong password.
    """
    role = PartnerRole.parse(data.get("userType") or data.get("role"))
    password = data.get("password") or ""

    if role is PartnerRole.UNIVERSE_FUND:
        query = Partner.query.filter_by(universe_fund_id=clean(data.get("universeFundId")), user_type=role.label)
    else:
        query = Partner.query.filter_by(unique_id=clean(data.get("uniqueId")), user_type=role.label)

    try:
        partner = query.first()
    except SQLAlchemyError as e:
        logger.error(f"Login lookup failed for {role.label}: {e}")
        raise StoreUnavailable("Partner store unavailable during login") from e

    if partner is None:
        return None
    if not partner.check_password(password):
        raise InvalidCredentials("Incorrect password.")
    return partner


def _linkage_key_taken(role: PartnerRole, key: str) -> bool:
    if role is PartnerRole.UNIVERSE_FUND:
        return Partner.query.filter_by(universe_fund_id=key).first() is not None
    return Partner.query.filter_by(unique_id=key).first() is not None


def _parent_exists(parent_id: str, role: PartnerRole) -> bool:
    if role is PartnerRole.UNIVERSE_FUND:
        query = Partner.query.filter_by(universe_fund_id=parent_id, user_type=role.label)
    else:
        query = Partner.query.filter_by(unique_id=parent_id, user_type=role.label)
    return query.first() is not None
