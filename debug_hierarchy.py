# Debug: print a partner's hierarchy and insights straight from the database
# Usage: python debug_hierarchy.py "<user type>" <partner id>
import sys

from app import create_app
from hierarchy.builder import build_hierarchy
from hierarchy.errors import HierarchyError
from hierarchy.insights import compute_insights
from hierarchy.store import SqlPartnerStore


def print_tree(node, level=0):
    print(f"{'    ' * level}- {node.name} ({node.role.label}) [{node.linkage_key}] {node.phone}")
    for child in node.children:
        print_tree(child, level + 1)


def main(argv):
    if len(argv) != 3:
        print('Usage: python debug_hierarchy.py "<user type>" <partner id>')
        return 2

    user_type, partner_id = argv[1], argv[2]
    app = create_app()
    with app.app_context():
        try:
            tree = build_hierarchy(SqlPartnerStore(), user_type, partner_id)
            report = compute_insights(tree)
        except HierarchyError as e:
            print(f"❌ {type(e).__name__}: {e}")
            return 1

    print("🔍 PARTNER HIERARCHY:")
    print_tree(tree)
    print("=" * 50)
    print(f"Total members:   {report.total_members}")
    print(f"Hierarchy depth: {report.hierarchy_depth}")
    for share in report.distribution:
        print(f"  {share.role.label:<16} {share.count:>5}  {share.percentage:>5.1f}%")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
