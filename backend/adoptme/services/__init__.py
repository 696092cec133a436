"""
AdoptMe Backend — Services Layer
==================================

Business logic between the routes (HTTP) and the database (persistence).

Service Inventory:
    - PetService: CRUD, availability filter, adopt, bulk replace
"""
