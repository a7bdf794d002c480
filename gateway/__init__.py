"""GraphQL gateway for the e-commerce microservices."""

__version__ = "1.0.0"
