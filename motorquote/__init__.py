"""Motor insurance quoting — premium engine, live preview, form wizard, checkout."""

__version__ = "0.1.0"
