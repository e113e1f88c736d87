"""
Tier state services
"""
