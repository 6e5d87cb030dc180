"""Domain error taxonomy shared by services and API handlers."""


class PerspectizeError(Exception):
    """Base class for errors that map onto an API response."""

    code = "error"
    status_code = 500

    def __init__(self, detail: str = ""):
        self.detail = detail or self.default_detail()
        super().__init__(self.detail)

    @classmethod
    def default_detail(cls) -> str:
        return cls.code.replace("_", " ")


class InvalidInputError(PerspectizeError):
    code = "invalid_input"
    status_code = 400


class InvalidURLError(InvalidInputError):
    code = "invalid_url"

    @classmethod
    def default_detail(cls) -> str:
        return "invalid YouTube URL"


class InvalidRatingError(InvalidInputError):
    """A rating field fell outside the 0..10000 range."""

    code = "invalid_rating"
    status_code = 422

    @classmethod
    def default_detail(cls) -> str:
        return "rating must be between 0 and 10000"


class NotFoundError(PerspectizeError):
    code = "not_found"
    status_code = 404

    @classmethod
    def default_detail(cls) -> str:
        return "resource not found"


class AlreadyExistsError(PerspectizeError):
    """A write collided with a uniqueness constraint."""

    code = "already_exists"
    status_code = 409

    @classmethod
    def default_detail(cls) -> str:
        return "resource already exists"


class DuplicateClaimError(AlreadyExistsError):
    code = "duplicate_claim"

    @classmethod
    def default_detail(cls) -> str:
        return "claim already exists for this user"


class SentinelUserError(PerspectizeError):
    code = "sentinel_user"
    status_code = 403

    @classmethod
    def default_detail(cls) -> str:
        return "cannot modify the system sentinel user"


class YouTubeAPIError(PerspectizeError):
    """The metadata source failed or answered with a non-success status."""

    code = "youtube_api_error"
    status_code = 502

    def __init__(self, detail: str = "", upstream_status: int = None):
        self.upstream_status = upstream_status
        super().__init__(detail)


class DurationParseError(PerspectizeError, ValueError):
    code = "invalid_duration"
    status_code = 400
