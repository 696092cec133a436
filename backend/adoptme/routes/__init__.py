"""
AdoptMe Backend — API Routes Package
======================================

Route Inventory:
    - pets.py:    GET/POST         /api/pets
                  GET/PATCH/DELETE /api/pets/{id}
                  POST             /api/pets/{id}/adopt
    - pages.py:   GET /, /browse, /interests   (HTML)
    - health.py:  GET /health

Routes stay thin: read the request, call PetService, shape the response.
"""
