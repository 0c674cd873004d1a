"""Infrastructure layer: HTTP gateway, credential store, durable storage."""
