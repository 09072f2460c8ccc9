"""
Portfolio Tracker - API Schemas
"""
