"""
LinkRisk API

FastAPI routers and dependencies.
"""
