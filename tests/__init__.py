"""
Partner CRM Test Suite

Test Categories:
- Taxonomy: role order, child/parent mapping, label parsing
- Builder: tree reconstruction, orphans, fan-out, timeouts, failures
- Insights: counts, percentages, depth
- Store: SQL adapter over the partners table
- API: register, login and dashboard endpoints
"""
