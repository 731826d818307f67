"""Alertmanager to Jira ticket bridge."""

__version__ = "0.4.0"
