from .models import Cat

__all__ = ["Cat"]
