"""
Persistence adapters.

Every backend implements the Storage contract from ``base`` (in-memory
reference store today, SQL for production). Routers depend on the contract,
never on a concrete backend.
"""
