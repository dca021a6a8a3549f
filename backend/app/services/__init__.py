# Services package init
"""
Todo Labels Backend — Services Layer
=====================================

What:  Data-access layer sitting between routes (HTTP) and the database.
Why:   Routes translate HTTP; services own queries, transactions and the
       business rules (validation, uniqueness, association cleanup).

Service Inventory:
    - TodoService:  todos and their label associations
    - LabelService: labels (and association cleanup on delete)
    - validation:   shared text and id-list checks
"""
