class FoodCartError(Exception):
    """Base exception for order-tracking errors."""
    pass

class ConfigurationError(FoodCartError):
    """Raised when the delivery simulation settings are invalid."""
    pass

class StorageError(FoodCartError):
    """Raised when the order history cannot be written to durable storage."""
    pass
