from flask import Blueprint, jsonify, request, session, current_app
from flask_login import login_user, logout_user

from hierarchy.accounts import register_partner, authenticate_partner
from hierarchy.errors import InvalidCredentials, RegistrationError, StoreUnavailable, UnknownRole
from logger import auth_logger

#==================================================================================================================

bp = Blueprint("auth", __name__, url_prefix="")


#===========================================================================
#      REGISTER ROUTE
#==============================================================================
@bp.route("/register", methods=["POST"])
def register():
    """
    Register a partner at any tier. Non-root tiers carry uniqueId, parentId
    and parentType; universe funds carry universeFundId.
    """
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({"error": "Invalid or missing JSON body"}), 400

    try:
        partner = register_partner(data)
    except (RegistrationError, UnknownRole) as e:
        return jsonify({"error": str(e)}), 400
    except StoreUnavailable as e:
        current_app.logger.error(f"Registration failed: {e}")
        return jsonify({"error": "Error registering user"}), 503

    return jsonify({"message": "User registered successfully", "id": partner.id}), 201


#===========================================================================
#      LOGIN / LOGOUT
#==============================================================================
@bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({"message": "Invalid or missing JSON body"}), 400

    try:
        partner = authenticate_partner(data)
    except UnknownRole as e:
        return jsonify({"message": str(e)}), 400
    except InvalidCredentials as e:
        return jsonify({"message": str(e)}), 400
    except StoreUnavailable as e:
        current_app.logger.error(f"Login failed: {e}")
        return jsonify({"message": "Server error during login"}), 503

    if partner is None:
        return jsonify({"message": "User not found."}), 400

    login_user(partner)
    session["user_id"] = partner.id
    auth_logger.info(f"Partner {partner.id} ({partner.user_type}) logged in")

    return jsonify({
        "message": "Login successful",
        "user": {
            "id": partner.id,
            "name": partner.name,
            "userType": partner.user_type,
            # parent reference for non-root tiers, own fund id for universe funds
            "parentId": partner.parent_id or partner.universe_fund_id,
        },
    }), 200


@bp.route("/logout", methods=["POST"])
def logout():
    logout_user()
    session.pop("user_id", None)
    return jsonify({"message": "Logged out"}), 200
