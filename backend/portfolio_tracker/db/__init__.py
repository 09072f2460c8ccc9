"""Portfolio Tracker - Database layer."""
