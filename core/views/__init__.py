"""Class-based views grouped by audience: public, admin, landlord and tenant."""
