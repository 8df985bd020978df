"""
Wrkr decision pipeline.

Turns detector observations about AI-agent tooling (agent cards, MCP servers,
CI automation, coding-assistant configs) into:
- policy checks and violations against a versioned rule catalog
- a ranked, correlated risk report with per-repository rollups
- a deterministic remediation plan with content-addressed identifiers
"""

__version__ = "1.0.0"
