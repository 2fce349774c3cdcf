# make_partners.py
# Usage: python make_partners.py [UNIVERSE_FUND_ID]
#
# Seeds one universe fund with two franchises, two sub-franchises per franchise
# and two channel partners per sub-franchise. Safe to re-run: partners that
# already exist are left alone.
import sys

from sqlalchemy.exc import IntegrityError

from app import create_app
from extensions import db
from hierarchy.taxonomy import PartnerRole, child_role
from models import Partner

DEFAULT_FUND_ID = "UF1"
DEFAULT_PASSWORD = "changeme"  # demo only, change after creation
FAN_OUT = 2


def _get_or_create(role, key, parent=None):
    if role is PartnerRole.UNIVERSE_FUND:
        partner = Partner.query.filter_by(universe_fund_id=key).first()
    else:
        partner = Partner.query.filter_by(unique_id=key).first()
    if partner:
        print(f"Found {role.label} {key} (id={partner.id})")
        return partner

    partner = Partner(
        name=f"{role.label.title()} {key}",
        phone=f"0700{Partner.query.count() + 1:06d}",
        email=f"{key.lower()}@partners.example",
        user_type=role.label,
    )
    if parent is None:
        partner.universe_fund_id = key
    else:
        partner.unique_id = key
        partner.parent_id = parent.linkage_key
        partner.parent_type = parent.user_type
    partner.set_password(DEFAULT_PASSWORD)

    try:
        db.session.add(partner)
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        raise RuntimeError(f"Could not create {role.label} {key}") from e

    print(f"Created {role.label} {key} (id={partner.id})")
    return partner


def make_partners(fund_id=DEFAULT_FUND_ID):
    app = create_app()
    with app.app_context():
        db.create_all()

        root = _get_or_create(PartnerRole.UNIVERSE_FUND, fund_id)
        tier = [root]
        role = child_role(PartnerRole.UNIVERSE_FUND)
        while role is not None:
            next_tier = []
            for parent in tier:
                for n in range(1, FAN_OUT + 1):
                    key = f"{parent.linkage_key}-{n}"
                    next_tier.append(_get_or_create(role, key, parent))
            tier = next_tier
            role = child_role(role)

        print(f"Dashboard: /dashboard/{PartnerRole.UNIVERSE_FUND.label}/{root.id}?insights=1")


if __name__ == "__main__":
    make_partners(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_FUND_ID)
