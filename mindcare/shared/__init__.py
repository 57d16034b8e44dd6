"""Shared domain models, utilities and database access for MindCare services."""
