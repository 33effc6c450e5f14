"""CHS Acquittals package.

Organized by feature modules (users, records, ingestion, reporting, exports,
settings, ...) with a thin Flask controller layer over service/repository layers.
"""
