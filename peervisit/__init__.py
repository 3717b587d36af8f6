"""Peer-visit package for facility quality assessments.

Modules:
- config: load and validate configuration (YAML or JSON)
- domain: facility catalog, rubric, schedule/assessment records, local store
- services: scoring engine, schedule constraint validator, dashboard reports
- gateway: persistence gateway (remote HTTP store with local fallback)
- engine: save workflows wiring the services to the gateway
- cli: command-line interface entrypoints
"""

__all__ = [
    "config",
    "domain",
    "services",
    "gateway",
    "engine",
    "cli",
]
