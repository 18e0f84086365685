"""StudyBot — LLM-backed explanations and support text."""
