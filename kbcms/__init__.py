"""KB CMS backend: OTP auth, news articles and quizzes on MongoDB + S3."""

__version__ = "2.0.0"
