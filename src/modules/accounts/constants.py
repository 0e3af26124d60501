"""Account constants."""

DEFAULT_PROFILE_IMAGE_URL = "/assets/man.jpg"

USERNAME_MAX_LENGTH = 150
