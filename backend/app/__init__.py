"""LinkFolio backend application."""
