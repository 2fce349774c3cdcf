#======================================================================================
#
# DASHBOARD: partner hierarchy and insights
#
#=======================================================================================
from flask import Blueprint, jsonify, request, current_app

from hierarchy.builder import HierarchyBuilder
from hierarchy.errors import EmptyTree, NotFound, StoreUnavailable, UnknownRole
from hierarchy.insights import compute_insights
from hierarchy.store import SqlPartnerStore
from logger import hierarchy_logger
from utils import is_truthy


bp = Blueprint("dashboard", __name__, url_prefix="")


def _builder():
    config = current_app.config
    return HierarchyBuilder(
        SqlPartnerStore(app=current_app._get_current_object()),
        pool_size=config.get("HIERARCHY_FANOUT_POOL_SIZE"),
        timeout=config.get("HIERARCHY_BUILD_TIMEOUT"),
    )


# ----------------------------------------------------------------------------------
# Full subtree owned by a partner, optionally with insights
# ----------------------------------------------------------------------------------
@bp.route("/dashboard/<user_type>/<partner_id>", methods=["GET"])
def get_dashboard(user_type, partner_id):
    hierarchy_logger.info(f"Dashboard request: userType={user_type!r} id={partner_id!r}")

    tree = _builder().build(user_type, partner_id)
    if is_truthy(request.args.get("insights")):
        report = compute_insights(tree)
        return jsonify({"tree": tree.to_dict(), "insights": report.to_dict()}), 200

    return jsonify(tree.to_dict()), 200


@bp.route("/dashboard/<user_type>/<partner_id>/insights", methods=["GET"])
def get_dashboard_insights(user_type, partner_id):
    tree = _builder().build(user_type, partner_id)
    return jsonify(compute_insights(tree).to_dict()), 200


# ----------------------------------------------------------------------------------
# Error mapping
# ----------------------------------------------------------------------------------
@bp.errorhandler(NotFound)
def handle_not_found(e):
    hierarchy_logger.info(f"Dashboard root not found: {e}")
    return jsonify({"message": "User not found"}), 404


@bp.errorhandler(UnknownRole)
def handle_unknown_role(e):
    return jsonify({"message": str(e)}), 400


@bp.errorhandler(StoreUnavailable)
def handle_store_unavailable(e):
    current_app.logger.error(f"Dashboard error: {e}")
    return jsonify({"message": "Server error while fetching dashboard data."}), 503


@bp.errorhandler(EmptyTree)
def handle_empty_tree(e):
    current_app.logger.error(f"Insights invariant violated: {e}", exc_info=e)
    return jsonify({"message": "Server error while computing insights."}), 500
