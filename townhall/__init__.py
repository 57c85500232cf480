"""Town Hall notification service package."""
