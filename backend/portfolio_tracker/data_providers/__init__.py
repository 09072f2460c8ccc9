"""
Portfolio Tracker - Data Providers
"""
