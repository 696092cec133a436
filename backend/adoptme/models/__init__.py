from adoptme.models.pet import Pet

__all__ = ["Pet"]
