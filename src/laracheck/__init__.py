"""laracheck — convention checks for Laravel + Inertia + Vue projects."""

__version__ = "0.1.0"
