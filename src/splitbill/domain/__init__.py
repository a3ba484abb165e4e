"""Domain layer for splitbill: entities, allocation engine and services.

Services are imported from their modules directly (``splitbill.domain.bill``,
``splitbill.domain.participant``) so the database layer can import entities
without pulling the services in.
"""
