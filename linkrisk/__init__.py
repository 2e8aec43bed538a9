"""
LinkRisk - Security Risk Aggregation Engine

Queries many threat intelligence providers concurrently and fuses their
verdicts into one risk assessment for a URL, IP address or email address.
"""

__version__ = "1.0.0"
