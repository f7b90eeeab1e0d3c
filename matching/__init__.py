"""Applicant-to-institution matching: catalog, scoring engine and HTTP routes."""
