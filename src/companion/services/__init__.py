"""Service layer - emotion tracking, safety, decision and orchestration."""
