"""
Feed build errors.

Every error aborts the build in progress; no partial feed is returned.
"""


class FeedError(Exception):
    """Base exception for feed build errors."""
    pass


class NoRegionsConfigured(FeedError):
    """The commerce backend has no regions, so no prices can be resolved."""

    def __init__(self, message: str = "No regions found"):
        super().__init__(message)


class RegionNotFound(FeedError):
    """A requested region id, country code or currency has no matching region."""

    def __init__(self, message: str = "No region found"):
        super().__init__(message)


class AvailabilityLookupFailed(FeedError):
    """An availability query for one sales channel group failed."""

    def __init__(self, sales_channel_id: str, cause: Exception):
        self.sales_channel_id = sales_channel_id
        self.cause = cause
        super().__init__(f"Availability lookup failed for sales channel {sales_channel_id}: {cause}")


class TransformHookFailed(FeedError):
    """The configured item transform hook raised."""

    def __init__(self, variant_id: str, cause: Exception):
        self.variant_id = variant_id
        self.cause = cause
        super().__init__(f"Item transform failed for variant {variant_id}: {cause}")
