"""tabmaster.orchestration package."""
