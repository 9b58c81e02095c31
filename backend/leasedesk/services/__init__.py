"""Service layer: business rules and database work, independent of HTTP."""
