"""Input validation — checks that the topic is a non-empty string before a run starts."""


def validate_topic(topic: str) -> str:
    """Validate that the topic is a non-empty string.

    Returns the stripped input on success.
    Raises ValueError if input is empty or whitespace-only.
    """
    if not isinstance(topic, str) or not topic.strip():
        raise ValueError("Topic must be a non-empty string.")
    return topic.strip()
