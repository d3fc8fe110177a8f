"""mindcheck_server — FastAPI REST API for the wellness-check SDK.

Exposes the WellnessWizard as a stateless HTTP API with session management,
stage transitions, and read-only reference data endpoints.
"""
