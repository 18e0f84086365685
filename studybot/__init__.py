"""StudyBot — chat tutor webhook service."""
