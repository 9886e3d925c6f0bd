"""REST service for Landlord."""
