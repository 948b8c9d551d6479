"""clients/ -- The clients resource: domain model, repository, access policy.

Layer rule: clients/ may import from auth/models.py and core/. It does NOT
import from api/ or cache/. api/ imports from clients/, not the other way around.
"""
