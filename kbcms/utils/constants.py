"""Constants for news, quiz and auth resources"""

NEWS_CATEGORIES = [
    "Education", "Technology", "Health", "Science",
    "Tips & Tricks", "Research", "Announcement", "General News",
]
NEWS_TYPES = ["Video", "Image", "Text"]

QUIZ_CATEGORIES = [
    "Education", "Technology", "Health", "Science",
    "Tips & Tricks", "Research", "General",
]
QUIZ_DIFFICULTIES = ["Easy", "Medium", "Hard"]

STATUS_DRAFT = "Draft"
STATUS_PUBLISHED = "Published"
STATUSES = [STATUS_DRAFT, STATUS_PUBLISHED]

DEFAULT_DIFFICULTY = "Easy"
DEFAULT_TIME_LIMIT = 30
DEFAULT_QUESTION_POINTS = 1

# Upload folders
NEWS_UPLOAD_FOLDER = "news"

ALLOWED_UPLOAD_MIME_PREFIXES = ("image/", "video/")

# Form values accepted for boolean fields
BOOL_STRINGS = {"true": True, "1": True, "false": False, "0": False}

RESPONSE_MESSAGES = {
    "newsCreated": "News article created successfully",
    "newsRetrieved": "News articles retrieved successfully",
    "newsUpdated": "News article updated successfully",
    "newsDeleted": "News article deleted successfully",
    "newsNotFound": "News article not found",
    "quizCreated": "Quiz submitted successfully",
    "quizRetrieved": "Quizzes retrieved successfully",
    "quizUpdated": "Quiz updated successfully",
    "quizDeleted": "Quiz deleted successfully",
    "quizNotFound": "Quiz not found",
    "otpSent": "OTP sent successfully",
    "otpResent": "OTP resent successfully. Please check your email/mobile.",
    "loginSuccess": "Login successful",
    "logoutSuccess": "Logout successful",
    "profileRetrieved": "User profile retrieved successfully",
    "profileSaved": "Student profile created/updated successfully",
    "userNotFound": "User not found",
    "schoolsRetrieved": "Schools retrieved successfully",
    "serverError": "An Error occurred please try again",
}
