"""Registration, login and JWT authentication."""
