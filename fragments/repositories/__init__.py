"""Repository layer for fragment persistence."""

from fragments.repositories.fragment_repository import FragmentRepository

__all__ = [
    "FragmentRepository",
]
