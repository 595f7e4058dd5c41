"""
Global settings for the lesson quiz core.
Endpoint layout follows the study platform's activities API.
"""

# API
API_BASE_URL = "http://localhost:8000"
LESSON_PATH = "/activities/lessons/{lesson_id}/"
GRADE_QUIZ_PATH = "/activities/lessons/{lesson_id}/grade-quiz/"
REQUEST_TIMEOUT_S = 60

# Quiz letters
OPTION_LETTERS = ("A", "B", "C", "D")
DEFAULT_CORRECT_ANSWER = "A"

# User-facing messages
PARSE_FAILURE_MESSAGE = "Failed to parse quiz format"
INCOMPLETE_ANSWERS_MESSAGE = "Please answer all questions before submitting."
GRADING_FAILURE_MESSAGE = "Failed to grade quiz"
LESSON_FAILURE_MESSAGE = "Failed to load lesson"
NO_TOKEN_MESSAGE = "No access token available"
