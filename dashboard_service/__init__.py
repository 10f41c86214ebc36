# Dashboard Service - Developer productivity analytics API
"""
Dashboard Service aggregates developer-assistant usage metrics
(AI-authored code lines, chat interactions, inline suggestions) stored in
DynamoDB and serves them to the dashboard frontend as JSON and CSV.
"""

__version__ = "1.0.0"
