class AppError(Exception):
    """Base exception for application errors."""
    pass

# --- Submission input errors (client must correct and resubmit) ---

class SubmissionRejectedError(AppError):
    """Base exception for answer sets rejected before scoring."""
    pass

class EmptySubmissionError(SubmissionRejectedError):
    """Raised when a submission contains no answers."""

    def __init__(self):
        super().__init__("At least one answer is required")

class MalformedAnswerError(SubmissionRejectedError):
    """Raised when a submitted entry is not a (question id, option id) pair of strings."""

    def __init__(self, position: int):
        self.position = position
        super().__init__(f"Malformed answer at position {position}")

class DuplicateAnswerError(SubmissionRejectedError):
    """Raised the first time a question id reappears in a submission."""

    def __init__(self, question_id: str):
        self.question_id = question_id
        super().__init__(f"Duplicate answer for question: {question_id}")

class UnknownQuestionError(SubmissionRejectedError):
    """Raised when an answer references a question missing from the catalog."""

    def __init__(self, question_id: str):
        self.question_id = question_id
        super().__init__(f"Invalid question ID: {question_id}")

class UnknownOptionError(SubmissionRejectedError):
    """Raised when the option does not belong to the answered question."""

    def __init__(self, question_id: str, option_id: str):
        self.question_id = question_id
        self.option_id = option_id
        super().__init__(f"Invalid option ID: {option_id} for question: {question_id}")

# --- Policy errors ---

class AlreadyCompletedError(AppError):
    """Raised when the user has already used their single attempt."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(
            "You have already completed the quiz. Each user can only take the quiz once."
        )

class NotOwnerError(AppError):
    """Raised when a user requests a result that belongs to someone else."""

    def __init__(self):
        super().__init__("You can only access your own quiz results")

# --- Lookup errors ---

class NotFoundError(AppError):
    pass

class ResultNotFoundError(NotFoundError):
    """Raised when no result exists for a token (or user)."""
    pass

class PersonalityNotFoundError(NotFoundError):
    """Raised when the winning category has no personality metadata."""

    def __init__(self, personality_id: str):
        self.personality_id = personality_id
        super().__init__(f"Personality {personality_id} not found")

# --- Infrastructure errors (transient) ---

class InfrastructureError(AppError):
    pass

class CatalogUnavailableError(InfrastructureError):
    """Raised when the question catalog is empty or cannot be read."""
    pass

class StoreUnavailableError(InfrastructureError):
    """Raised when the result store or attempt gate cannot be reached."""
    pass
