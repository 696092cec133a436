"""
AdoptMe Backend — Exception Hierarchy
=======================================

What:  Application-specific exceptions raised by the service layer and routes.
How:   Each exception carries a message and an optional context dict.
       Handlers registered in main.py turn them into JSON responses.

Exception Hierarchy:
    AdoptMeError (base)         → 500
    ├── PetNotFoundError        → 404 {"message": "Pet not found"}
    ├── InvalidPetIdError       → 500 (malformed identifier reached the store layer)
    ├── PetRequestError         → endpoint-specific status and body
    └── DatabaseError           → 500, details logged server-side only
"""

from typing import Any, Dict, Optional


class AdoptMeError(Exception):
    """
    Base exception for all AdoptMe application errors.

    Attributes:
        message:  Client-facing description.
        context:  Extra debugging info, logged but never returned.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class PetNotFoundError(AdoptMeError):
    """
    Raised when an id-addressed operation finds no pet.

    The session returns None for a missing row; the service converts that
    into this exception so every route produces the same 404 body.
    """

    status_code = 404

    def __init__(self, pet_id: Optional[str] = None):
        ctx = {"pet_id": pet_id} if pet_id else {}
        super().__init__(message="Pet not found", context=ctx)
        self.pet_id = pet_id


class InvalidPetIdError(AdoptMeError):
    """
    Raised when a pet id is not a well-formed identifier.

    Deliberately a server error rather than a 404: a malformed id never
    names a pet that could exist.
    """

    status_code = 500

    def __init__(self, pet_id: str):
        super().__init__(message="Malformed pet id", context={"pet_id": pet_id})
        self.pet_id = pet_id
        self.error = f"'{pet_id}' is not a valid pet identifier"


class PetRequestError(AdoptMeError):
    """
    Raised by a route when its operation fails for a reason other than
    "not found".

    Each endpoint has its own fixed message and status, e.g.
    POST → 500 "Failed to create pet", PATCH → 400 "Failed to update pet".
    `error` carries the underlying reason when the endpoint exposes it.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.status_code = status_code
        self.error = error


class DatabaseError(AdoptMeError):
    """
    Raised when a store operation fails unexpectedly.

    The message returned to the client is always generic; the original
    error type goes into `context` for the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
