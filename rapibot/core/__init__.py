"""Platform-agnostic core: limits, media selection, dispatch and observability."""
