"""
sheetsync: normalized checklist store (sheet -> topics -> sub-topics -> questions) kept in step with a
persistence service through optimistic mutations and rollback.
"""
__version__ = "0.1.0"
