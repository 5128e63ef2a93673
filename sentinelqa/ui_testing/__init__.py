"""UI automation: framework, page objects and browser-backed tests."""
