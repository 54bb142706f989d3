"""Onboarding questionnaire: data model, step flow, file and location input.

Import from the submodules (``intake.flow``, ``intake.schemas``, ...);
this package module stays empty so the gateway can import the schemas
without pulling in the flow.
"""
