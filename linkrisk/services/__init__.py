"""
LinkRisk Services
"""
